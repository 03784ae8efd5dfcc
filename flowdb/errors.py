"""Error kinds raised by FlowDB stores."""


class FlowDBError(Exception):
    """Base class for every error raised by flowdb."""


class ValidationError(FlowDBError, ValueError):
    """An argument was rejected before touching the store (key, operand, operator, name)."""


class TypeMismatchError(FlowDBError, TypeError):
    """The stored value has the wrong type for the requested operation."""


class StoreIOError(FlowDBError, OSError):
    """Creating, reading, writing or copying a store file failed."""


class ParseError(FlowDBError, ValueError):
    """A store file does not contain a JSON object."""
