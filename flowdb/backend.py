"""Blocking file I/O for store files.

Every function here runs on the calling thread. AsyncFlowDB pushes them
onto a worker thread with asyncio.to_thread.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from .errors import ParseError, StoreIOError
from .utils import load_object

logger = logging.getLogger(__name__)


def read_store_file(path: Path) -> dict[str, Any]:
    """Read and parse a store file into a fresh dict."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Could not read %s: %s", path, e)
        raise StoreIOError(f"could not read {path}: {e}") from e
    except UnicodeDecodeError as e:
        logger.error("Could not decode %s: %s", path, e)
        raise ParseError(f"{path} is not UTF-8 text: {e}") from e
    try:
        return load_object(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error("Could not parse %s: %s", path, e)
        raise ParseError(f"{path} is not a JSON object: {e}") from e


def create_store_file(path: Path) -> None:
    """Create an empty store file; fails if the file already exists."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "x", encoding="utf-8") as f:
            f.write("{}")
    except OSError as e:
        logger.error("Could not create %s: %s", path, e)
        raise StoreIOError(f"could not create {path}: {e}") from e
    logger.info("Created store file %s", path)


def load_store_file(path: Path) -> dict[str, Any]:
    """Return the map held in ``path``, creating an empty file if absent."""
    if path.exists():
        return read_store_file(path)
    create_store_file(path)
    return {}


def write_store_file(path: Path, text: str) -> None:
    """Overwrite a store file with already-serialized JSON text.

    The write is not atomic: a failure part way through can leave the
    file truncated.
    """
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error("Could not save %s: %s", path, e)
        raise StoreIOError(f"could not write {path}: {e}") from e
    logger.debug("Flushed %d bytes to %s", len(text), path)


def copy_store_file(src: Path, dst: Path) -> None:
    """Copy a store file verbatim."""
    try:
        shutil.copyfile(src, dst)
    except OSError as e:
        logger.error("Could not copy %s to %s: %s", src, dst, e)
        raise StoreIOError(f"could not copy {src} to {dst}: {e}") from e
