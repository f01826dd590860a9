"""Database handle, snapshot and restore."""

from __future__ import annotations

import logging
import shutil
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from ..models import RANKED_VIEW_DDL
from .errors import NotFound, StorageError

logger = logging.getLogger(__name__)


class Database:
    """Owns the SQLite engine for one store file.

    Every session, snapshot and restore runs under ``gate``, so a restore
    never swaps the file underneath a running query or insert.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.gate = threading.RLock()
        self.engine = self._open()

    def _open(self) -> Engine:
        engine = create_engine(
            f"sqlite:///{self.path}", connect_args={"check_same_thread": False}
        )
        SQLModel.metadata.create_all(engine)
        with engine.begin() as conn:
            conn.execute(text(RANKED_VIEW_DDL))
        return engine

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session while holding the gate."""

        with self.gate:
            with Session(self.engine) as session:
                yield session

    def snapshot(self, destination: Path) -> None:
        """Copy the live store file to ``destination``, replacing any older copy."""

        destination = Path(destination)
        with self.gate:
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(self.path, destination)
            except OSError as exc:
                raise StorageError("Backup failed", exc) from exc
        logger.info("Snapshot written to %s", destination)

    def restore(self, source: Path) -> None:
        """Replace the live store with the contents of ``source``.

        The engine is closed, the file copied over the live path and a new
        engine opened. A failed copy reopens the untouched original file.
        """

        source = Path(source)
        if not source.is_file():
            raise NotFound("No backup file found")

        with self.gate:
            self.engine.dispose()
            try:
                shutil.copyfile(source, self.path)
            except OSError as exc:
                try:
                    self.engine = self._open()
                except SQLAlchemyError:
                    logger.exception("Could not reopen %s after failed restore", self.path)
                raise StorageError("Restore failed", exc) from exc

            try:
                self.engine = self._open()
            except SQLAlchemyError as exc:
                raise StorageError(
                    "Backup restored but the database could not be reopened", exc
                ) from exc
        logger.warning("Database %s restored from %s", self.path, source)

    def close(self) -> None:
        with self.gate:
            self.engine.dispose()


__all__ = ["Database"]
