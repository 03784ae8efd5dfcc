"""JSON file-backed key/value store (blocking discipline)."""

import logging
from pathlib import Path
from typing import Any, Callable

from . import backend, operations
from .config import StoreConfig, coerce_store_config
from .operations import MISSING, validate_key, validate_name, validate_value
from .utils import dump_object

logger = logging.getLogger(__name__)


class BaseStore:
    """State and read-only operations shared by FlowDB and AsyncFlowDB.

    Subclasses own every mutation and the file writes that go with it.
    Reads never touch the file.
    """

    def __init__(self, config: StoreConfig | dict | None = None):
        self._config = coerce_store_config(config)
        self._path = self._config.resolve_path()
        self._data: dict[str, Any] = {}
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    def _backup_path(self, name: str) -> Path:
        return self._path.parent / f"{name}.json"

    def _snapshot_text(self) -> str:
        return dump_object(self._data)

    def _lookup(self, key: str) -> Any:
        return self._data.get(validate_key(key), MISSING)

    # --- Entries ---

    def get(self, key: str, default: Any = MISSING) -> Any:
        validate_key(key)
        return self._data.get(key, default)

    def has(self, key: str) -> bool:
        validate_key(key)
        return key in self._data

    def all(self) -> dict[str, Any]:
        return dict(self._data)

    # --- Array lookups ---

    def find(self, key: str, value: Any) -> list:
        return operations.find_items(self._lookup(key), value)

    def find_by(self, key: str, prop: str, value: Any) -> list:
        return operations.find_by(self._lookup(key), prop, value)

    # --- Functional helpers (results are not persisted) ---

    def map(self, key: str, fn: Callable, *, with_index: bool = False) -> list:
        return operations.map_items(self._lookup(key), fn, with_index)

    def filter(self, key: str, fn: Callable, *, with_index: bool = False) -> list:
        return operations.filter_items(self._lookup(key), fn, with_index)

    def reduce(self, key: str, fn: Callable, initial: Any = MISSING, *, with_index: bool = False) -> Any:
        return operations.reduce_items(self._lookup(key), fn, initial, with_index)

    def for_each(self, key: str, fn: Callable, *, with_index: bool = False) -> None:
        operations.for_each_item(self._lookup(key), fn, with_index)


class FlowDB(BaseStore):
    """Blocking JSON file store; every mutation rewrites the whole file.

    Usage:
        db = FlowDB({"file_path": "state.json"})
        db.set("count", 10)
        db.add("count", 5)          # -> 15
        db.push("users", {"id": 1})
        db.get("missing")           # -> MISSING
        db.backup("before-migration")

    A flush that fails half way can leave the file truncated; there is no
    rollback.
    """

    def __init__(self, config: StoreConfig | dict | None = None):
        super().__init__(config)
        self.load()

    def load(self) -> None:
        self._data = backend.load_store_file(self._path)
        self._loaded = True

    def flush(self) -> None:
        backend.write_store_file(self._path, self._snapshot_text())

    # --- Entries ---

    def set(self, key: str, value: Any) -> None:
        validate_key(key)
        validate_value(value)
        self._data[key] = value
        self.flush()

    def update(self, data: dict[str, Any]) -> None:
        """Merge multiple keys and save once."""
        for key, value in data.items():
            validate_key(key)
            validate_value(value)
        self._data.update(data)
        self.flush()

    def delete(self, key: str) -> None:
        validate_key(key)
        self._data.pop(key, None)
        self.flush()

    def delete_all(self) -> None:
        self._data.clear()
        self.flush()

    # --- Numeric ---

    def add(self, key: str, delta: float | int) -> float | int:
        return self.math(key, "+", delta)

    def subtract(self, key: str, delta: float | int) -> float | int:
        return self.math(key, "-", delta)

    def math(self, key: str, operator: str, operand: float | int) -> float | int:
        result = operations.apply_math(self._lookup(key), operator, operand)
        self.set(key, result)
        return result

    # --- Arrays ---

    def push(self, key: str, value: Any) -> list:
        result = operations.pushed(self._lookup(key), value)
        self.set(key, result)
        return result

    def pull(self, key: str, value: Any) -> list | None:
        current = self._lookup(key)
        if current is MISSING or current is None:
            return None
        result = operations.pulled(current, value)
        self.set(key, result)
        return result

    # --- Backups ---

    def backup(self, name: str) -> Path:
        validate_name(name, "backup")
        target = self._backup_path(name)
        backend.copy_store_file(self._path, target)
        logger.info("Backed up %s to %s", self._path, target)
        return target

    def restore(self, name: str) -> None:
        validate_name(name, "restore")
        source = self._backup_path(name)
        backend.copy_store_file(source, self._path)
        self.load()
        logger.info("Restored %s from %s", self._path, source)
