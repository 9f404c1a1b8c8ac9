"""Core splice modules."""

from .errors import ArgumentRangeError, InvalidArgumentError
from .file_splicer import FileSplicer
from .operations import cut, cut_out, insert, move, move_to, write_start
from .safety import (
    PerformanceMonitor,
    SafeSpliceOperation,
    safe_splice,
    safe_splice_context,
)
from .search import MAX_PATTERN_LENGTH, NOT_FOUND, find, find_all, match_at_cursor
from .shifting import DEFAULT_BUFFER_SIZE, collapse_region, shift_region
from .storage import ByteStorage, StreamStorage, as_storage

__all__ = [
    # Errors
    'InvalidArgumentError',
    'ArgumentRangeError',

    # Storage
    'ByteStorage',
    'StreamStorage',
    'as_storage',

    # Primitives
    'DEFAULT_BUFFER_SIZE',
    'shift_region',
    'collapse_region',
    'match_at_cursor',

    # Operations
    'write_start',
    'insert',
    'cut',
    'cut_out',
    'move',
    'move_to',
    'find',
    'find_all',
    'NOT_FOUND',
    'MAX_PATTERN_LENGTH',

    # File editing
    'FileSplicer',
    'SafeSpliceOperation',
    'safe_splice_context',
    'safe_splice',
    'PerformanceMonitor',
]
