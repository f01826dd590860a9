import json
import random

import pytest
from sqlalchemy import inspect, text

from conftest import make_submission
from runboard.core.errors import DuplicateName, Forbidden, ValidationError
from runboard.core.time import format_duration
from runboard.models import RANKED_VIEW, rank_key
from runboard.services import SubmissionStore


def _names(records):
    return [record.name for record in records]


def test_insert_assigns_increasing_ids(store):
    first = store.insert(make_submission("Alice"))
    second = store.insert(make_submission("Bob"))

    assert first.id is not None
    assert second.id > first.id


def test_duplicate_name_differing_in_case_is_rejected(store):
    store.insert(make_submission("Alice"))

    assert store.exists_case_insensitive("aLiCe")
    with pytest.raises(DuplicateName):
        store.insert(make_submission("ALICE"))
    assert store.count() == 1


def test_unique_index_rejects_duplicates_that_slip_past_the_check(store, monkeypatch):
    store.insert(make_submission("Alice"))
    monkeypatch.setattr(store, "_name_taken", lambda session, name: False)

    with pytest.raises(DuplicateName):
        store.insert(make_submission("alice"))
    assert store.count() == 1


def test_ranking_puts_sentinel_last_and_fastest_first(store):
    store.insert(make_submission("NoTime", completionTimeMs=0, completionTimeFormatted="00:00:00"))
    store.insert(make_submission("Slow", completionTimeMs=300_000, completionTimeFormatted="00:05:00"))
    store.insert(make_submission("Fast", completionTimeMs=60_000, completionTimeFormatted="00:01:00"))
    store.insert(make_submission("Broken", completionTimeMs=10, completionTimeFormatted="00:00:00"))
    store.insert(make_submission("Tie", completionTimeMs=60_000, completionTimeFormatted="00:01:00"))

    ranked = store.list_ranked()

    assert _names(ranked) == ["Fast", "Tie", "Slow", "NoTime", "Broken"]


def test_in_memory_and_view_order_match_query(store):
    rng = random.Random(7)
    for index in range(25):
        ms = rng.choice([0, 1_000, 5_000, rng.randint(1, 100_000)])
        formatted = "00:00:00" if rng.random() < 0.3 else format_duration(ms)
        store.insert(
            make_submission(f"P{index}", completionTimeMs=ms, completionTimeFormatted=formatted)
        )

    ranked = store.list_ranked()
    shuffled = list(ranked)
    rng.shuffle(shuffled)

    with store.database.engine.connect() as conn:
        view_ids = [row.id for row in conn.execute(text(f"SELECT id FROM {RANKED_VIEW}"))]

    assert [r.id for r in sorted(shuffled, key=rank_key)] == [r.id for r in ranked]
    assert view_ids == [r.id for r in ranked]


def test_ranking_reflects_mutations_immediately(store):
    store.insert(make_submission("A", completionTimeMs=90_000, completionTimeFormatted="00:01:30"))
    assert _names(store.list_ranked()) == ["A"]

    store.insert(make_submission("B", completionTimeMs=30_000, completionTimeFormatted="00:00:30"))
    assert _names(store.list_ranked()) == ["B", "A"]


def test_rename_without_match_reports_zero(store):
    store.insert(make_submission("Carol"))

    assert store.rename("Alice", "Bob") == 0
    assert _names(store.list_ranked()) == ["Carol"]


def test_rename_matches_stored_name_exactly(store):
    store.insert(make_submission("Alice"))

    assert store.rename("alice", "Bob") == 0
    assert store.rename("Alice", "Bob") == 1
    assert _names(store.list_ranked()) == ["Bob"]
    assert store.exists_case_insensitive("BOB")
    assert not store.exists_case_insensitive("alice")


def test_rename_may_change_case_of_same_player(store):
    store.insert(make_submission("alice"))

    assert store.rename("alice", "Alice") == 1
    assert _names(store.list_ranked()) == ["Alice"]


def test_rename_onto_existing_name_is_rejected(store):
    store.insert(make_submission("Alice"))
    store.insert(make_submission("Bob"))

    with pytest.raises(DuplicateName):
        store.rename("Alice", "bob")
    assert sorted(_names(store.list_ranked())) == ["Alice", "Bob"]


def test_rename_requires_both_names(store):
    with pytest.raises(ValidationError):
        store.rename("Alice", "   ")


def test_clear_protected_table_is_forbidden(services):
    protected = SubmissionStore(services.database, protected_tables={"game_progress"})
    protected.insert(make_submission("Alice"))

    with pytest.raises(Forbidden):
        protected.clear("game_progress")
    assert protected.count() == 1


def test_clear_empties_table_but_keeps_definition(store):
    store.insert(make_submission("Alice"))
    store.insert(make_submission("Bob"))

    assert store.clear("game_progress") == 2
    assert store.count() == 0
    assert "game_progress" in inspect(store.database.engine).get_table_names()

    store.insert(make_submission("Carol"))
    assert store.count() == 1


def test_ids_are_not_reused_after_clear(store):
    first = store.insert(make_submission("Alice"))
    store.clear("game_progress")

    second = store.insert(make_submission("Alice"))

    assert second.id > first.id


def test_clear_unknown_table_is_rejected(store):
    with pytest.raises(ValidationError):
        store.clear("sqlite_master; DROP TABLE game_progress")


def test_load_synthetic_inserts_consistent_rows(store):
    store.insert(make_submission("Existing"))

    ids = store.load_synthetic(30, rng=random.Random(1))

    assert len(ids) == 30
    assert store.count() == 31
    for record in store.list_ranked():
        if record.name == "Existing":
            continue
        details = json.loads(record.function_details)
        assert record.total_functions == sum(details.values())
        assert 1 <= record.level <= 10
        assert record.completion_time_formatted == format_duration(record.completion_time_ms)
        assert ", " in record.timestamp


def test_batch_insert_is_all_or_nothing(store):
    store.insert(make_submission("Taken"))
    batch = [make_submission(f"New{i}") for i in range(5)] + [make_submission("TAKEN")]

    with pytest.raises(DuplicateName):
        store.insert_many(batch)
    assert store.count() == 1


def test_batch_with_internal_duplicate_is_rejected(store):
    with pytest.raises(ValidationError):
        store.insert_many([make_submission("Dup"), make_submission("dup")])
    assert store.count() == 0
