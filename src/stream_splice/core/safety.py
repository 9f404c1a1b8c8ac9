"""Locking, rollback and byte accounting around in-place splices."""
import logging
import os
import shutil
import tempfile
import time
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from filelock import FileLock

from .storage import StreamStorage

logger = logging.getLogger(__name__)


class SafeSpliceOperation:
    """Hold a file's lock during a splice and undo the splice if it fails.

    A splice that stops midway leaves the tail half shifted, so the file is
    snapshotted next to itself before editing and moved back on failure.
    Only a snapshot taken by this instance is ever restored or removed.
    """

    def __init__(
        self, file_path: Union[str, Path], timeout: float = 30, create_backup: bool = True
    ):
        """Initialize safe splice operation.

        Args:
            file_path: Path to the file to edit
            timeout: Lock timeout in seconds
            create_backup: Whether to snapshot the file before editing
        """
        self.file_path = Path(file_path)
        self.create_backup = create_backup
        self.lock = FileLock(f"{self.file_path}.lock", timeout=timeout)
        self.backup_path: Optional[Path] = None

    def __enter__(self):
        self.lock.acquire()
        logger.info(f"Locked {self.file_path} for splicing")

        if self.create_backup and self.file_path.exists():
            try:
                self.backup_path = self._snapshot()
            except Exception:
                self.lock.release()
                raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if self.backup_path is None:
                if exc_type is not None:
                    logger.error(f"Splice of {self.file_path} failed, no snapshot to restore: {exc_val}")
            elif exc_type is not None:
                logger.error(f"Splice of {self.file_path} failed, restoring snapshot: {exc_val}")
                os.replace(self.backup_path, self.file_path)
            else:
                self.backup_path.unlink()
        finally:
            self.lock.release()
            logger.info(f"Unlocked {self.file_path}")

    def _snapshot(self) -> Path:
        """Copy the file to a uniquely named sibling and return its path."""
        fd, name = tempfile.mkstemp(
            dir=self.file_path.parent, prefix=f".{self.file_path.name}.", suffix=".backup"
        )
        with os.fdopen(fd, "wb") as snapshot, open(self.file_path, "rb") as original:
            shutil.copyfileobj(original, snapshot)
        shutil.copymode(self.file_path, name)
        logger.info(f"Snapshotted {self.file_path} to {name}")
        return Path(name)


@contextmanager
def safe_splice_context(
    file_path: Union[str, Path], timeout: float = 30, create_backup: bool = True
):
    """Context manager yielding the locked file as a ``StreamStorage``.

    Args:
        file_path: Path to file to edit
        timeout: Lock timeout in seconds
        create_backup: Whether to snapshot the file first

    Yields:
        Storage over the file opened ``r+b``
    """
    with SafeSpliceOperation(file_path, timeout, create_backup):
        with open(file_path, "r+b") as f:
            yield StreamStorage(f)


def safe_splice(
    file_path: Union[str, Path],
    edit_function: Callable[[StreamStorage], Any],
    timeout: float = 30,
    create_backup: bool = True,
) -> Any:
    """Run an edit on a locked file, restoring it if the edit raises.

    Args:
        file_path: Path to file to edit
        edit_function: Function taking the file's storage and editing it
        timeout: Lock timeout in seconds
        create_backup: Whether to snapshot the file first

    Returns:
        Whatever ``edit_function`` returns
    """
    with safe_splice_context(file_path, timeout, create_backup) as storage:
        return edit_function(storage)


@dataclass
class Measurement:
    """One timed operation; ``byte_count`` may be set while it runs."""

    operation: str
    byte_count: int = 0
    duration: float = 0.0


@dataclass
class OperationStats:
    """Running totals for one operation name."""

    count: int = 0
    byte_count: int = 0
    total_time: float = 0.0
    max_time: float = 0.0

    def add(self, measurement: Measurement):
        self.count += 1
        self.byte_count += measurement.byte_count
        self.total_time += measurement.duration
        self.max_time = max(self.max_time, measurement.duration)

    def as_dict(self) -> dict:
        return {
            "count": self.count,
            "byte_count": self.byte_count,
            "total_time": self.total_time,
            "average_time": self.total_time / self.count,
            "max_time": self.max_time,
            "bytes_per_second": self.byte_count / self.total_time if self.total_time else 0.0,
        }


class PerformanceMonitor:
    """Per-operation call counts, bytes spliced and durations."""

    def __init__(self):
        self._stats: dict[str, OperationStats] = {}

    @contextmanager
    def measure_operation(self, operation_name: str, byte_count: int = 0):
        """Time the block and record it under ``operation_name``.

        Args:
            operation_name: Name to record the measurement under
            byte_count: Bytes the operation inserts, removes or relocates;
                the yielded ``Measurement`` can update it once known

        Yields:
            The ``Measurement`` being recorded
        """
        measurement = Measurement(operation_name, byte_count)
        started = time.perf_counter()
        try:
            yield measurement
        finally:
            measurement.duration = time.perf_counter() - started
            self._stats.setdefault(operation_name, OperationStats()).add(measurement)
            logger.debug(
                f"{operation_name}: {measurement.byte_count} bytes in {measurement.duration:.6f}s"
            )

    def get_stats(self, operation: str) -> dict:
        """Totals for ``operation``, or an empty dict if it never ran."""
        if operation not in self._stats:
            return {}
        return self._stats[operation].as_dict()

    def get_all_stats(self) -> dict:
        return {name: stats.as_dict() for name, stats in self._stats.items()}
