"""In-place insert, cut and move operations on seekable byte streams.

Every operation validates its arguments before touching the stream and then
delegates the data movement to the chunked primitives in ``shifting``.
"""
import logging
from typing import BinaryIO, Union

from .errors import ArgumentRangeError, InvalidArgumentError
from .shifting import DEFAULT_BUFFER_SIZE, collapse_region, shift_region
from .storage import ByteStorage, as_storage

logger = logging.getLogger(__name__)


def _check_buffer_size(buffer_size: int):
    if buffer_size <= 0:
        raise ArgumentRangeError("buffer_size must be positive", "buffer_size", buffer_size)


def _check_offset(storage: ByteStorage, name: str, value: int):
    if value < 0 or value > storage.length:
        raise InvalidArgumentError(
            f"{name} must be within the stream (length {storage.length})", name, value
        )


def _write_zeros(storage: ByteStorage, count: int, buffer_size: int):
    zeros = bytes(min(count, buffer_size))
    while count > 0:
        step = min(count, len(zeros))
        storage.write(zeros[:step])
        count -= step


def write_start(stream: Union[ByteStorage, BinaryIO], data: bytes,
                buffer_size: int = DEFAULT_BUFFER_SIZE):
    """Prepend bytes to the stream.

    Args:
        stream: Storage or seekable binary stream
        data: Bytes to write at offset 0
        buffer_size: Scratch buffer size (default 512KB)

    Raises:
        ArgumentRangeError: If buffer_size is not positive
    """
    insert(stream, 0, data, buffer_size)


def insert(stream: Union[ByteStorage, BinaryIO], start: int, data: bytes,
           buffer_size: int = DEFAULT_BUFFER_SIZE):
    """Insert bytes at ``start``, shifting the rest of the stream forward.

    Args:
        stream: Storage or seekable binary stream
        start: Insertion offset (``0 <= start <= length``)
        data: Bytes to insert
        buffer_size: Scratch buffer size (default 512KB)

    Raises:
        InvalidArgumentError: If start is outside the stream
        ArgumentRangeError: If buffer_size is not positive
    """
    storage = as_storage(stream)
    _check_offset(storage, "start", start)
    _check_buffer_size(buffer_size)
    if not data:
        return

    logger.debug(f"Inserting {len(data)} bytes at {start}")
    shift_region(storage, start, len(data), buffer_size)
    storage.position = start
    storage.write(data)


def _clamp_cut(storage: ByteStorage, start: int, length: int, buffer_size: int) -> int:
    _check_offset(storage, "start", start)
    _check_buffer_size(buffer_size)
    return min(length, storage.length - start)


def cut(stream: Union[ByteStorage, BinaryIO], start: int, length: int,
        buffer_size: int = DEFAULT_BUFFER_SIZE):
    """Remove ``length`` bytes at ``start``.

    The length is clamped to the bytes available after ``start``; a
    non-positive length is a no-op.

    Raises:
        InvalidArgumentError: If start is outside the stream
        ArgumentRangeError: If buffer_size is not positive
    """
    storage = as_storage(stream)
    length = _clamp_cut(storage, start, length, buffer_size)
    if length <= 0:
        return

    logger.debug(f"Cutting {length} bytes at {start}")
    collapse_region(storage, start, length, buffer_size)


def cut_out(stream: Union[ByteStorage, BinaryIO], start: int, length: int,
            buffer_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
    """Remove ``length`` bytes at ``start`` and return them.

    Returns:
        The removed bytes (empty if nothing was removed)

    Raises:
        InvalidArgumentError: If start is outside the stream
        ArgumentRangeError: If buffer_size is not positive
    """
    storage = as_storage(stream)
    length = _clamp_cut(storage, start, length, buffer_size)
    if length <= 0:
        return b""

    result = bytearray(length)
    storage.position = start
    count = storage.readinto(result)

    logger.debug(f"Cutting out {count} bytes at {start}")
    collapse_region(storage, start, count, buffer_size)
    return bytes(result[:count])


def move(stream: Union[ByteStorage, BinaryIO], start: int, offset: int,
         buffer_size: int = DEFAULT_BUFFER_SIZE):
    """Shift everything from ``start`` forward by ``offset`` bytes.

    The gap ``[start, start + offset)`` is filled with zeros.

    Raises:
        InvalidArgumentError: If start is outside the stream
        ArgumentRangeError: If buffer_size or offset is not positive
    """
    storage = as_storage(stream)
    _check_offset(storage, "start", start)
    _check_buffer_size(buffer_size)
    if offset <= 0:
        raise ArgumentRangeError("offset must be positive", "offset", offset)

    logger.debug(f"Moving bytes from {start} forward by {offset}")
    shift_region(storage, start, offset, buffer_size)
    storage.position = start
    _write_zeros(storage, offset, buffer_size)


def move_to(stream: Union[ByteStorage, BinaryIO], start: int, to: int, length: int,
            buffer_size: int = DEFAULT_BUFFER_SIZE):
    """Relocate a block of bytes so that it begins at ``to``.

    ``to`` is the block's offset in the resulting stream, which keeps its
    length. The block is clamped to the bytes available at ``start``.

    Args:
        stream: Storage or seekable binary stream
        start: Offset of the first byte to move
        to: Offset of the block after the move
        length: Number of bytes to move
        buffer_size: Scratch buffer size (default 512KB)

    Raises:
        InvalidArgumentError: If start or to is outside the stream, or the
            block would not fit at ``to``
        ArgumentRangeError: If buffer_size or length is not positive
    """
    storage = as_storage(stream)
    _check_offset(storage, "start", start)
    _check_offset(storage, "to", to)
    _check_buffer_size(buffer_size)
    if length <= 0:
        raise ArgumentRangeError("length must be positive", "length", length)

    count = min(length, storage.length - start)
    if to + count > storage.length:
        raise InvalidArgumentError(
            f"a {count}-byte block does not fit at to (length {storage.length})", "to", to
        )
    if count == 0 or to == start:
        return

    block = bytearray(count)
    storage.position = start
    count = storage.readinto(block)

    logger.debug(f"Moving {count} bytes from {start} to {to}")
    collapse_region(storage, start, count, buffer_size)
    shift_region(storage, to, count, buffer_size)
    storage.position = to
    storage.write(memoryview(block)[:count])
