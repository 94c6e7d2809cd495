from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import PersistenceError
from app.db.models import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SqlKeyValueStore:
    """
    Durable string-keyed store on top of the kv_entries table.
    Every SQLAlchemy failure surfaces as PersistenceError.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as db:
                return db.execute(select(KeyValueEntry.value).where(KeyValueEntry.key == key)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to read key %s: %s", key, e)
            raise PersistenceError(f"read of '{key}' failed") from e

    def set(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as db:
                entry = db.get(KeyValueEntry, key)
                if entry is None:
                    db.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                db.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to write key %s: %s", key, e)
            raise PersistenceError(f"write of '{key}' failed") from e


class MemoryKeyValueStore:
    """Dict-backed store for tests and throwaway runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
