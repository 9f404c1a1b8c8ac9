"""Path-bound editor applying splice operations to a file in place."""
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO, Optional, Union

from . import operations, search
from .safety import PerformanceMonitor
from .shifting import DEFAULT_BUFFER_SIZE
from .storage import StreamStorage

logger = logging.getLogger(__name__)


class FileSplicer:
    """Insert, cut, move and search bytes of a file without rewriting it.

    Every edit is done in place through a bounded scratch buffer, so the
    file may be much larger than available memory:
    - Inserting or prepending bytes
    - Cutting byte ranges (optionally returning them)
    - Relocating blocks
    - Searching for byte patterns
    """

    def __init__(self, file_path: Union[str, Path], buffer_size: int = DEFAULT_BUFFER_SIZE):
        """Initialize file splicer.

        Args:
            file_path: Path to the file to edit
            buffer_size: Scratch buffer size for every operation (default 512KB)
        """
        self.file_path = Path(file_path)
        self.buffer_size = buffer_size
        self.monitor = PerformanceMonitor()
        self._file: Optional[BinaryIO] = None
        self._storage: Optional[StreamStorage] = None

    def __enter__(self):
        """Context manager entry."""
        if self._file is None:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def open(self, mode: str = "r+b"):
        """Open the file.

        Args:
            mode: File open mode (must allow reading; ``rb`` only for searches)
        """
        if self._file is not None:
            raise RuntimeError("File is already open")

        file = open(self.file_path, mode)
        try:
            self._storage = StreamStorage(file)
        except TypeError:
            file.close()
            raise
        self._file = file
        logger.debug(f"Opened {self.file_path} ({mode})")

    def close(self):
        """Close the file."""
        if self._file is not None:
            self._file.close()
            self._file = None
            self._storage = None

    @property
    def storage(self) -> StreamStorage:
        """Storage wrapping the open file."""
        if self._storage is None:
            raise RuntimeError("File not open")
        return self._storage

    def size(self) -> int:
        """Get file size."""
        if self._storage is None:
            return self.file_path.stat().st_size
        return self._storage.length

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to ``size`` bytes at ``offset``."""
        storage = self.storage
        storage.position = offset
        return storage.stream.read(size)

    def write_start(self, data: bytes):
        """Prepend bytes to the file."""
        with self.monitor.measure_operation("write_start", len(data)):
            operations.write_start(self.storage, data, self.buffer_size)

    def insert(self, start: int, data: bytes):
        """Insert bytes at ``start``."""
        with self.monitor.measure_operation("insert", len(data)):
            operations.insert(self.storage, start, data, self.buffer_size)

    def cut(self, start: int, length: int):
        """Remove ``length`` bytes at ``start``."""
        with self.monitor.measure_operation("cut") as measurement:
            before = self.storage.length
            operations.cut(self.storage, start, length, self.buffer_size)
            measurement.byte_count = before - self.storage.length

    def cut_out(self, start: int, length: int) -> bytes:
        """Remove ``length`` bytes at ``start`` and return them."""
        with self.monitor.measure_operation("cut_out") as measurement:
            removed = operations.cut_out(self.storage, start, length, self.buffer_size)
            measurement.byte_count = len(removed)
            return removed

    def move(self, start: int, offset: int):
        """Shift bytes from ``start`` forward by ``offset``, zero-filling the gap."""
        with self.monitor.measure_operation("move", offset):
            operations.move(self.storage, start, offset, self.buffer_size)

    def move_to(self, start: int, to: int, length: int):
        """Relocate ``length`` bytes at ``start`` so they begin at ``to``."""
        with self.monitor.measure_operation("move_to") as measurement:
            block = max(0, min(length, self.storage.length - start))
            operations.move_to(self.storage, start, to, length, self.buffer_size)
            measurement.byte_count = block

    def find(self, pattern: bytes, max_position: Optional[int] = None) -> int:
        """Offset of the first occurrence of ``pattern``, or -1."""
        with self.monitor.measure_operation("find"):
            return search.find(self.storage, pattern, max_position)

    def find_all(self, pattern: bytes, max_count: Optional[int] = None,
                 max_position: Optional[int] = None) -> Iterator[int]:
        """Lazily yield offsets of ``pattern``; do not edit while iterating.

        The search is recorded as one ``find_all`` operation once the
        iterator is exhausted or discarded. Iterating after ``close()``
        raises ``RuntimeError``.
        """
        storage = self.storage
        matches = search.find_all(storage, pattern, max_count, max_position)
        return self._monitored_matches(storage, matches)

    def _monitored_matches(self, storage: StreamStorage, matches: Iterator[int]) -> Iterator[int]:
        with self.monitor.measure_operation("find_all"):
            while True:
                if self._storage is not storage:
                    raise RuntimeError("File not open")
                offset = next(matches, None)
                if offset is None:
                    return
                yield offset

    def flush(self):
        """Flush changes to disk."""
        if self._storage is not None:
            self._storage.flush()
