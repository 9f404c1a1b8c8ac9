"""Chunked primitives that open and close gaps inside a storage.

Both routines move data through a single scratch buffer of at most
``buffer_size`` bytes, so storage far larger than available memory can be
edited in place.
"""
import logging

from .storage import ByteStorage

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 524288


def shift_region(storage: ByteStorage, start: int, distance: int,
                 buffer_size: int = DEFAULT_BUFFER_SIZE):
    """Move every byte in ``[start, length)`` forward by ``distance``.

    Chunks are copied from the end of the region towards ``start`` so that a
    chunk is always read before any write can overwrite it. The first write
    lands past the old end and grows the storage by ``distance``. Bytes in
    ``[start, start + distance)`` are left stale for the caller to overwrite.

    Args:
        storage: Storage to edit
        start: First byte of the region to shift (``0 <= start <= length``)
        distance: Number of bytes to shift by (``> 0``)
        buffer_size: Maximum bytes held in memory at once
    """
    length = storage.length
    buffer = bytearray(min(buffer_size, length - start))
    read_end = length
    chunks = 0

    while read_end > start:
        chunk_start = max(start, read_end - buffer_size)
        chunk = memoryview(buffer)[:read_end - chunk_start]

        storage.position = chunk_start
        count = storage.readinto(chunk)
        storage.position = chunk_start + distance
        storage.write(chunk[:count])

        read_end = chunk_start
        chunks += 1

    logger.debug(
        f"Shifted {length - start} bytes at {start} by {distance} "
        f"in {chunks} chunks (buffer {buffer_size})"
    )


def collapse_region(storage: ByteStorage, start: int, length: int,
                    buffer_size: int = DEFAULT_BUFFER_SIZE):
    """Remove ``length`` bytes at ``start`` and compact the tail leftward.

    The tail is copied front to back; the write cursor trails the read
    cursor by ``length`` so no unread byte is overwritten. The storage is
    truncated by ``length`` afterwards.

    Args:
        storage: Storage to edit
        start: First byte to remove
        length: Number of bytes to remove (``start + length <= storage length``)
        buffer_size: Maximum bytes held in memory at once
    """
    old_length = storage.length
    buffer = bytearray(buffer_size)
    read_start = start + length
    chunks = 0

    while True:
        storage.position = read_start
        count = storage.readinto(buffer)
        storage.position = read_start - length
        storage.write(memoryview(buffer)[:count])
        read_start += buffer_size
        chunks += 1
        if count < buffer_size:
            break

    storage.set_length(old_length - length)
    logger.debug(
        f"Collapsed {length} bytes at {start} in {chunks} chunks (buffer {buffer_size})"
    )
