"""Game telemetry collection and leaderboard service."""
