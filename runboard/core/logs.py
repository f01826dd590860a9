"""Logging setup shared by the app and its runner."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")


__all__ = ["LOG_FORMAT", "configure_logging"]
