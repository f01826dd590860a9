"""Persistence and ranking of game results."""

from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Sequence, Set

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, func, select

from ..core.database import Database
from ..core.errors import DuplicateName, Forbidden, StorageError, ValidationError
from ..models import GameProgress, ranked_order
from .submissions import Submission, name_key
from .synthetic import generate_submissions

logger = logging.getLogger(__name__)

# Logical table names accepted by maintenance operations.
TABLES = {
    "game_progress": GameProgress,
}


@contextmanager
def _storage_errors(session: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        raise StorageError(f"Could not {action}", exc) from exc


def _commit(session: Session, name: str, action: str) -> None:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateName(name) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise StorageError(f"Could not {action}", exc) from exc


class SubmissionStore:
    """Game results table plus the operations the API performs on it.

    Each method runs in one session under the database gate, so a
    uniqueness check and the write that follows cannot interleave with
    another request. The unique ``name_key`` index backs this up.
    """

    def __init__(self, database: Database, protected_tables: Iterable[str] = ()) -> None:
        self.database = database
        self.protected_tables = frozenset(protected_tables)

    def _name_taken(self, session: Session, name: str) -> bool:
        statement = select(GameProgress.id).where(GameProgress.name_key == name_key(name))
        return session.exec(statement).first() is not None

    def exists_case_insensitive(self, name: str) -> bool:
        with self.database.session() as session:
            with _storage_errors(session, "check name"):
                return self._name_taken(session, name)

    def insert(self, submission: Submission) -> GameProgress:
        """Store a new result and return it with its assigned id."""

        with self.database.session() as session:
            with _storage_errors(session, "check name"):
                taken = self._name_taken(session, submission.name)
            if taken:
                raise DuplicateName(submission.name)

            row = submission.to_model()
            session.add(row)
            _commit(session, submission.name, "save game data")
            with _storage_errors(session, "save game data"):
                session.refresh(row)
        logger.info("Stored result #%s for %r", row.id, row.name)
        return row

    def insert_many(self, submissions: Sequence[Submission]) -> List[int]:
        """Insert a batch in one transaction; either every row lands or none."""

        keys = [submission.name_key for submission in submissions]
        if len(set(keys)) != len(keys):
            raise ValidationError("Batch contains the same name twice")

        with self.database.session() as session:
            with _storage_errors(session, "check names"):
                clash = session.exec(
                    select(GameProgress.name).where(GameProgress.name_key.in_(keys))
                ).first()
            if clash is not None:
                raise DuplicateName(clash)

            rows = [submission.to_model() for submission in submissions]
            session.add_all(rows)
            _commit(session, "batch", "save batch")
            with _storage_errors(session, "save batch"):
                return [row.id for row in rows]

    def load_synthetic(self, count: int, rng: Optional[random.Random] = None) -> List[int]:
        """Insert ``count`` generated results as a single batch."""

        with self.database.gate:
            batch = generate_submissions(count, taken=self._name_keys(), rng=rng)
            ids = self.insert_many(batch)
        logger.warning("Loaded %d synthetic results", len(ids))
        return ids

    def _name_keys(self) -> Set[str]:
        with self.database.session() as session:
            with _storage_errors(session, "read names"):
                return set(session.exec(select(GameProgress.name_key)).all())

    def rename(self, find_name: str, replace_name: str) -> int:
        """Rename every row whose stored name equals ``find_name`` exactly.

        Returns the number of rows changed; 0 means nothing matched.
        """

        replace_name = (replace_name or "").strip()
        if not find_name or not replace_name:
            raise ValidationError("Both findName and replaceName are required")

        new_key = name_key(replace_name)
        with self.database.session() as session:
            with _storage_errors(session, "rename"):
                rows = session.exec(
                    select(GameProgress).where(GameProgress.name == find_name)
                ).all()
                clash = session.exec(
                    select(GameProgress.id).where(
                        GameProgress.name_key == new_key,
                        GameProgress.name != find_name,
                    )
                ).first()
            if not rows:
                return 0
            if clash is not None:
                raise DuplicateName(replace_name)

            for row in rows:
                row.name = replace_name
                row.name_key = new_key
                session.add(row)
            _commit(session, replace_name, "rename")

        logger.warning("Renamed %r to %r (%d rows)", find_name, replace_name, len(rows))
        return len(rows)

    def clear(self, table_name: str) -> int:
        """Delete every row of a logical table, keeping the table itself."""

        key = (table_name or "").strip()
        if key in self.protected_tables:
            raise Forbidden(f"Table {key} is protected")
        model = TABLES.get(key)
        if model is None:
            raise ValidationError(f"Unknown table: {table_name}")

        with self.database.session() as session:
            with _storage_errors(session, f"clear {key}"):
                result = session.connection().execute(delete(model))
                session.commit()
        logger.warning("Cleared table %s (%d rows)", key, result.rowcount)
        return result.rowcount

    def list_ranked(self) -> List[GameProgress]:
        """All results in leaderboard order, read fresh from the table."""

        with self.database.session() as session:
            with _storage_errors(session, "read game data"):
                return list(
                    session.exec(select(GameProgress).order_by(*ranked_order())).all()
                )

    def count(self) -> int:
        with self.database.session() as session:
            with _storage_errors(session, "count game data"):
                return session.exec(select(func.count(GameProgress.id))).one()


__all__ = ["SubmissionStore", "TABLES"]
