"""Byte pattern search over a storage, one byte at a time."""
import logging
from collections.abc import Iterator
from typing import BinaryIO, Optional, Union

from .storage import ByteStorage, as_storage

logger = logging.getLogger(__name__)

NOT_FOUND = -1
MAX_PATTERN_LENGTH = 32767

# match_at_cursor results that are not offsets
END_OF_DATA = -1
MISMATCH = -2


def match_at_cursor(storage: ByteStorage, pattern: bytes) -> int:
    """Try to match ``pattern`` at the storage cursor.

    Reads one byte at a time and stops at the first byte that differs.

    Args:
        storage: Storage positioned at the candidate offset
        pattern: Non-empty byte pattern

    Returns:
        The match offset, ``END_OF_DATA`` if the data ran out first, or
        ``MISMATCH``
    """
    matched = 0
    while matched < len(pattern):
        value = storage.read_byte()
        if value is None:
            return END_OF_DATA
        if value != pattern[matched]:
            return MISMATCH
        matched += 1
    return storage.position - len(pattern)


def _scan(storage: ByteStorage, pattern: bytes, max_count: Optional[int],
          max_position: Optional[int]) -> Iterator[int]:
    if not pattern or len(pattern) > MAX_PATTERN_LENGTH:
        return
    if max_position is None:
        max_position = storage.length

    found = 0
    cursor = 0
    while cursor < max_position and (max_count is None or found < max_count):
        storage.position = cursor
        result = match_at_cursor(storage, pattern)
        if result == END_OF_DATA:
            return
        if result == MISMATCH:
            cursor += 1
            continue
        found += 1
        yield result
        cursor = result + len(pattern)


def find(stream: Union[ByteStorage, BinaryIO], pattern: bytes,
         max_position: Optional[int] = None) -> int:
    """Find the first occurrence of a byte pattern.

    Args:
        stream: Storage or seekable binary stream to search
        pattern: Bytes to look for (at most 32767 bytes)
        max_position: Only consider matches starting before this offset
            (None for the whole stream)

    Returns:
        Offset of the first match, or ``NOT_FOUND``
    """
    storage = as_storage(stream)
    for offset in _scan(storage, bytes(pattern), 1, max_position):
        logger.debug(f"Found {len(pattern)}-byte pattern at {offset}")
        return offset
    return NOT_FOUND


def find_all(stream: Union[ByteStorage, BinaryIO], pattern: bytes,
             max_count: Optional[int] = None,
             max_position: Optional[int] = None) -> Iterator[int]:
    """Lazily yield offsets of non-overlapping occurrences of a pattern.

    The scan uses the storage cursor, which persists between items, so the
    storage must not be modified until iteration is finished.

    Args:
        stream: Storage or seekable binary stream to search
        pattern: Bytes to look for (at most 32767 bytes)
        max_count: Stop after this many matches (None for no limit)
        max_position: Only consider matches starting before this offset
            (None for the whole stream)

    Returns:
        Generator of match offsets in ascending order
    """
    storage = as_storage(stream)
    return _scan(storage, bytes(pattern), max_count, max_position)
