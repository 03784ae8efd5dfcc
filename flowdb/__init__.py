"""FlowDB - an in-memory key/value map mirrored to a single JSON file."""

from .aio import AsyncFlowDB
from .config import AppConfig, LoggingConfig, StoreConfig, configure_logging, load_config
from .errors import FlowDBError, ParseError, StoreIOError, TypeMismatchError, ValidationError
from .operations import MISSING
from .store import FlowDB

__all__ = [
    "MISSING",
    "AppConfig",
    "AsyncFlowDB",
    "FlowDB",
    "FlowDBError",
    "LoggingConfig",
    "ParseError",
    "StoreConfig",
    "StoreIOError",
    "TypeMismatchError",
    "ValidationError",
    "configure_logging",
    "load_config",
]
