"""
Key-value string store adapters.

The rest of the app only ever calls get/set/delete with string keys and
string values. Two backends exist: a JSON file (default) and a SQL table.
Neither offers atomicity across keys.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import json
import logging
import os
import tempfile
import threading
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from vault.core.config import get_settings
from vault.db.models import KeyValueEntry
from vault.db.session import create_all, get_session

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the underlying store cannot be read or written."""


class KeyValueStore:
    """Contract shared by the store backends."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def items(self) -> dict[str, str]:
        raise NotImplementedError


class JsonFileStore(KeyValueStore):
    """
    Whole store kept as one JSON object on disk, rewritten on every write.

    Writes hold a per-file lock across load-modify-save and replace the file
    atomically, so a reader never sees a half-written document. A file that
    cannot be parsed is read as empty but never overwritten.
    """

    _locks: dict[Path, threading.RLock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        with self._locks_guard:
            self._lock = self._locks.setdefault(self.path.resolve(), threading.RLock())

    def _read(self) -> dict:
        """Raw document; ValueError when the file is not a JSON object."""
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise StoreError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("top-level value is not an object")
        return data

    def _load(self) -> dict[str, str]:
        try:
            data = self._read()
        except ValueError as exc:
            logger.warning("Data file %s is unreadable (%s); reading it as empty", self.path, exc)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _load_for_write(self) -> dict:
        try:
            return self._read()
        except ValueError as exc:
            logger.error("Refusing to overwrite unreadable data file %s: %s", self.path, exc)
            raise StoreError(f"Data file {self.path} is unreadable; not overwriting it") from exc

    def _save(self, db: dict) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(db, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StoreError(f"Could not write {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            db = self._load_for_write()
            db[key] = value
            self._save(db)

    def delete(self, key: str) -> None:
        with self._lock:
            db = self._load_for_write()
            if key in db:
                del db[key]
                self._save(db)

    def items(self) -> dict[str, str]:
        with self._lock:
            return self._load()


class SQLKeyValueStore(KeyValueStore):
    """One row per key in the kv_store table."""

    def __init__(self, *, create_schema: bool = True) -> None:
        if create_schema:
            try:
                create_all()
            except SQLAlchemyError as exc:
                raise StoreError(f"Could not prepare the SQL store: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        try:
            with get_session() as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read key {key!r}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with get_session() as session:
                session.merge(KeyValueEntry(key=key, value=value))
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not write key {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            with get_session() as session:
                session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not delete key {key!r}: {exc}") from exc

    def items(self) -> dict[str, str]:
        try:
            with get_session() as session:
                rows = session.execute(select(KeyValueEntry)).scalars().all()
                return {row.key: row.value for row in rows}
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not list keys: {exc}") from exc


@lru_cache
def get_store() -> KeyValueStore:
    """Store selected by STORAGE_BACKEND (cached; clear with get_store.cache_clear())."""
    settings = get_settings()
    if settings.storage_backend == "sql":
        logger.info("Using SQL key-value store")
        return SQLKeyValueStore()
    logger.info("Using JSON key-value store at %s", settings.data_file)
    return JsonFileStore(settings.data_file)
