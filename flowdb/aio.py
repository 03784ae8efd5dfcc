"""JSON file-backed key/value store for asyncio code."""

import asyncio
import logging
from pathlib import Path
from typing import Any

from . import backend, operations
from .config import StoreConfig
from .errors import FlowDBError
from .operations import MISSING, validate_key, validate_name, validate_value
from .store import BaseStore

logger = logging.getLogger(__name__)


class AsyncFlowDB(BaseStore):
    """FlowDB with file I/O moved off the event loop.

    Mutations on one instance are serialized by a per-instance lock, so
    concurrent un-awaited calls (``asyncio.gather(db.add(...), db.add(...))``)
    apply one after another and never lose updates. The JSON text is built
    on the loop before the write is handed to a worker thread.

    Reads (get, has, all, find, map, ...) are plain methods: they only look
    at the in-memory map.
    """

    def __init__(self, config: StoreConfig | dict | None = None):
        super().__init__(config)
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, config: StoreConfig | dict | None = None) -> "AsyncFlowDB":
        """Create a store and load its backing file."""
        db = cls(config)
        await db.load()
        return db

    async def load(self) -> None:
        async with self._lock:
            await self._load()

    async def flush(self) -> None:
        async with self._lock:
            self._require_loaded()
            await self._flush()

    async def _load(self) -> None:
        self._data = await asyncio.to_thread(backend.load_store_file, self._path)
        self._loaded = True

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise FlowDBError(f"{self._path} is not loaded; create the store with await AsyncFlowDB.open(...)")

    async def _flush(self) -> None:
        await asyncio.to_thread(backend.write_store_file, self._path, self._snapshot_text())

    async def _set(self, key: str, value: Any) -> None:
        self._require_loaded()
        validate_value(value)
        self._data[key] = value
        await self._flush()

    # --- Entries ---

    async def set(self, key: str, value: Any) -> None:
        validate_key(key)
        async with self._lock:
            await self._set(key, value)

    async def update(self, data: dict[str, Any]) -> None:
        """Merge multiple keys and save once."""
        for key, value in data.items():
            validate_key(key)
            validate_value(value)
        async with self._lock:
            self._require_loaded()
            self._data.update(data)
            await self._flush()

    async def delete(self, key: str) -> None:
        validate_key(key)
        async with self._lock:
            self._require_loaded()
            self._data.pop(key, None)
            await self._flush()

    async def delete_all(self) -> None:
        async with self._lock:
            self._require_loaded()
            self._data.clear()
            await self._flush()

    # --- Numeric ---

    async def add(self, key: str, delta: float | int) -> float | int:
        return await self.math(key, "+", delta)

    async def subtract(self, key: str, delta: float | int) -> float | int:
        return await self.math(key, "-", delta)

    async def math(self, key: str, operator: str, operand: float | int) -> float | int:
        validate_key(key)
        async with self._lock:
            result = operations.apply_math(self._lookup(key), operator, operand)
            await self._set(key, result)
        return result

    # --- Arrays ---

    async def push(self, key: str, value: Any) -> list:
        validate_key(key)
        async with self._lock:
            result = operations.pushed(self._lookup(key), value)
            await self._set(key, result)
        return result

    async def pull(self, key: str, value: Any) -> list | None:
        validate_key(key)
        async with self._lock:
            current = self._lookup(key)
            if current is MISSING or current is None:
                return None
            result = operations.pulled(current, value)
            await self._set(key, result)
        return result

    # --- Backups ---

    async def backup(self, name: str) -> Path:
        validate_name(name, "backup")
        target = self._backup_path(name)
        async with self._lock:
            self._require_loaded()
            await asyncio.to_thread(backend.copy_store_file, self._path, target)
        logger.info("Backed up %s to %s", self._path, target)
        return target

    async def restore(self, name: str) -> None:
        validate_name(name, "restore")
        source = self._backup_path(name)
        async with self._lock:
            await asyncio.to_thread(backend.copy_store_file, source, self._path)
            await self._load()
        logger.info("Restored %s from %s", self._path, source)
