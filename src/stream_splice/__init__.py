"""In-place insert, cut, move and search operations on seekable byte streams."""

from .core import (
    DEFAULT_BUFFER_SIZE,
    NOT_FOUND,
    ArgumentRangeError,
    ByteStorage,
    FileSplicer,
    InvalidArgumentError,
    StreamStorage,
    as_storage,
    cut,
    cut_out,
    find,
    find_all,
    insert,
    move,
    move_to,
    safe_splice,
    safe_splice_context,
    write_start,
)

__version__ = "0.1.0"

__all__ = [
    # Operations
    "write_start",
    "insert",
    "cut",
    "cut_out",
    "move",
    "move_to",
    "find",
    "find_all",
    "NOT_FOUND",
    "DEFAULT_BUFFER_SIZE",
    # Storage
    "ByteStorage",
    "StreamStorage",
    "as_storage",
    # File editing
    "FileSplicer",
    "safe_splice",
    "safe_splice_context",
    # Errors
    "InvalidArgumentError",
    "ArgumentRangeError",
]
