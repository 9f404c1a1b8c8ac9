"""Storage adapters exposing the primitives the splice algorithms need."""
import io
import logging
from typing import BinaryIO, Optional, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)

_ZERO_FILL_CHUNK = 64 * 1024
_STREAM_METHODS = ("seekable", "seek", "tell", "readinto", "write", "truncate")


@runtime_checkable
class ByteStorage(Protocol):
    """Seekable, resizable byte container.

    Anything implementing these members can be edited in place: a file
    handle, an in-memory buffer or a remote blob wrapper.
    """

    @property
    def length(self) -> int:
        """Current size in bytes."""
        ...

    @property
    def position(self) -> int:
        """Current read/write cursor."""
        ...

    @position.setter
    def position(self, value: int) -> None: ...

    def readinto(self, buffer) -> int:
        """Fill ``buffer`` from the cursor and return the number of bytes read.

        A count smaller than ``len(buffer)`` means the end of data was reached.
        """
        ...

    def write(self, data) -> int:
        """Write ``data`` at the cursor, growing the storage past its end."""
        ...

    def read_byte(self) -> Optional[int]:
        """Read one byte, or return None at the end of data."""
        ...

    def set_length(self, length: int) -> None:
        """Truncate or zero-extend to exactly ``length`` bytes."""
        ...


class StreamStorage:
    """``ByteStorage`` over a seekable binary Python stream.

    Works with ``io.BytesIO``, files opened in ``r+b`` mode and any other
    object with ``seek``/``tell``/``readinto``/``write``/``truncate``.
    """

    def __init__(self, stream: BinaryIO):
        """Wrap a stream.

        Args:
            stream: Seekable binary stream opened for reading and writing
        """
        if not stream.seekable():
            raise TypeError(f"Stream {stream!r} is not seekable")
        # Append mode sends every write to the end, whatever the cursor.
        mode = getattr(stream, "mode", "")
        if isinstance(mode, str) and "a" in mode:
            raise TypeError(f"Stream {stream!r} is opened in append mode")
        self.stream = stream

    def __repr__(self):
        return f"StreamStorage({self.stream!r})"

    @property
    def length(self) -> int:
        current = self.stream.tell()
        end = self.stream.seek(0, io.SEEK_END)
        self.stream.seek(current)
        return end

    @property
    def position(self) -> int:
        return self.stream.tell()

    @position.setter
    def position(self, value: int):
        self.stream.seek(value)

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        total = 0
        # Raw streams may return short reads before the end of data.
        while total < len(view):
            count = self.stream.readinto(view[total:])
            if not count:
                break
            total += count
        return total

    def write(self, data) -> int:
        view = memoryview(data).cast("B")
        total = 0
        # Unbuffered streams may write only part of the data.
        while total < len(view):
            count = self.stream.write(view[total:])
            if not count:
                raise OSError(f"Short write to {self!r} after {total} bytes")
            total += count
        return total

    def read_byte(self) -> Optional[int]:
        data = self.stream.read(1)
        if not data:
            return None
        return data[0]

    def set_length(self, length: int):
        """Truncate or zero-extend the stream.

        ``truncate`` alone does not grow every stream type (``BytesIO``
        ignores larger sizes), so growth is done by writing zeros.
        """
        current = self.length
        position = self.stream.tell()
        if length <= current:
            self.stream.truncate(length)
        else:
            logger.debug(f"Extending {self!r} from {current} to {length} bytes")
            self.stream.seek(current)
            remaining = length - current
            zeros = bytes(min(remaining, _ZERO_FILL_CHUNK))
            while remaining > 0:
                step = min(remaining, len(zeros))
                self.write(zeros[:step])
                remaining -= step
        self.stream.seek(min(position, length))

    def flush(self):
        """Flush the underlying stream."""
        self.stream.flush()


def as_storage(target: Union[ByteStorage, BinaryIO]) -> ByteStorage:
    """Return ``target`` as a ``ByteStorage``, wrapping raw streams.

    Args:
        target: A ``ByteStorage`` or a seekable binary stream

    Returns:
        Storage exposing the splice primitives

    Raises:
        TypeError: If target is neither
    """
    if isinstance(target, ByteStorage):
        return target
    if isinstance(target, io.TextIOBase):
        raise TypeError(f"Expected a binary stream, got text stream {target!r}")
    if all(hasattr(target, name) for name in _STREAM_METHODS):
        return StreamStorage(target)
    raise TypeError(f"Object {target!r} is not a seekable binary stream")
