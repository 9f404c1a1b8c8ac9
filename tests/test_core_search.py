"""Tests for byte pattern search."""
import io
import types

from hypothesis import given
from hypothesis import strategies as st
from stream_splice.core.search import (
    END_OF_DATA,
    MAX_PATTERN_LENGTH,
    MISMATCH,
    NOT_FOUND,
    find,
    find_all,
    match_at_cursor,
)
from stream_splice.core.storage import StreamStorage

SAMPLE = bytes([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 1, 2, 3, 4, 5])


def reference_find_all(data: bytes, pattern: bytes) -> list[int]:
    """Non-overlapping left-to-right occurrences using bytes.find."""
    positions = []
    pos = data.find(pattern)
    while pos != -1:
        positions.append(pos)
        pos = data.find(pattern, pos + len(pattern))
    return positions


class TestMatchAtCursor:
    """Test the single-position matcher."""

    def test_match_returns_offset(self) -> None:
        """Test a full match reports where it started."""
        storage = StreamStorage(io.BytesIO(b"xxabcx"))
        storage.position = 2

        assert match_at_cursor(storage, b"abc") == 2
        assert storage.position == 5

    def test_mismatch(self) -> None:
        """Test the matcher stops at the first differing byte."""
        storage = StreamStorage(io.BytesIO(b"abdabc"))

        assert match_at_cursor(storage, b"abc") == MISMATCH
        assert storage.position == 3

    def test_end_of_data(self) -> None:
        """Test running out of data mid-pattern."""
        storage = StreamStorage(io.BytesIO(b"ab"))

        assert match_at_cursor(storage, b"abc") == END_OF_DATA


class TestFind:
    """Test finding the first occurrence."""

    def test_find_documented_example(self) -> None:
        """Test finding a pattern in the sample stream."""
        assert find(io.BytesIO(SAMPLE), bytes([3, 4, 5])) == 2

    def test_find_absent_pattern(self) -> None:
        """Test a missing pattern returns NOT_FOUND."""
        assert find(io.BytesIO(SAMPLE), bytes([4, 3])) == NOT_FOUND
        assert NOT_FOUND == -1

    def test_find_after_partial_match(self) -> None:
        """Test a failed partial match does not hide a real one."""
        assert find(io.BytesIO(b"aab"), b"ab") == 1
        assert find(io.BytesIO(b"aaab"), b"aab") == 1

    def test_find_pattern_at_end(self) -> None:
        """Test a match that ends the stream."""
        assert find(io.BytesIO(b"hello world"), b"world") == 6

    def test_find_empty_pattern(self) -> None:
        """Test an empty pattern never matches."""
        assert find(io.BytesIO(SAMPLE), b"") == NOT_FOUND

    def test_find_empty_stream(self) -> None:
        """Test searching an empty stream."""
        assert find(io.BytesIO(), b"a") == NOT_FOUND

    def test_find_pattern_too_long(self) -> None:
        """Test patterns above the size limit are never found."""
        data = b"a" * (MAX_PATTERN_LENGTH + 1)

        assert find(io.BytesIO(data), data) == NOT_FOUND
        assert find(io.BytesIO(data), data[:MAX_PATTERN_LENGTH]) == 0

    def test_find_max_position(self) -> None:
        """Test matches must start before max_position."""
        stream = io.BytesIO(b"....abc")

        assert find(stream, b"abc", max_position=4) == NOT_FOUND
        assert find(stream, b"abc", max_position=5) == 4

    def test_find_accepts_bytearray_pattern(self) -> None:
        """Test any bytes-like pattern is accepted."""
        assert find(io.BytesIO(SAMPLE), bytearray([10, 11])) == 9

    @given(
        prefix=st.binary(max_size=100),
        pattern=st.binary(min_size=1, max_size=10),
        suffix=st.binary(max_size=100),
    )
    def test_find_agrees_with_bytes_find(
        self, prefix: bytes, pattern: bytes, suffix: bytes
    ) -> None:
        """Find returns the first occurrence, like bytes.find."""
        data = prefix + pattern + suffix

        assert find(io.BytesIO(data), pattern) == data.find(pattern)


class TestFindAll:
    """Test lazily finding every occurrence."""

    def test_find_all_documented_example(self) -> None:
        """Test both occurrences in the sample stream."""
        assert list(find_all(io.BytesIO(SAMPLE), bytes([3, 4, 5]))) == [2, 13]

    def test_find_all_is_lazy(self) -> None:
        """Test results are produced on demand."""
        stream = io.BytesIO(SAMPLE)

        results = find_all(stream, bytes([3, 4, 5]))

        assert isinstance(results, types.GeneratorType)
        assert next(results) == 2
        assert stream.tell() == 5
        assert next(results) == 13
        assert list(results) == []

    def test_find_all_non_overlapping(self) -> None:
        """Test the scan resumes after each match."""
        assert list(find_all(io.BytesIO(b"aaaaa"), b"aa")) == [0, 2]

    def test_find_all_max_count(self) -> None:
        """Test max_count limits the number of matches."""
        stream = io.BytesIO(b"ab" * 10)

        assert list(find_all(stream, b"ab", max_count=3)) == [0, 2, 4]
        assert list(find_all(stream, b"ab", max_count=0)) == []

    def test_find_all_max_position(self) -> None:
        """Test max_position bounds where matches may start."""
        stream = io.BytesIO(SAMPLE)

        assert list(find_all(stream, bytes([3, 4, 5]), max_position=13)) == [2]
        assert list(find_all(stream, bytes([3, 4, 5]), max_position=14)) == [2, 13]

    def test_find_all_pattern_too_long(self) -> None:
        """Test oversized patterns yield nothing."""
        data = b"a" * (MAX_PATTERN_LENGTH + 1)

        assert list(find_all(io.BytesIO(data), data)) == []

    def test_find_all_empty_pattern(self) -> None:
        """Test an empty pattern yields nothing."""
        assert list(find_all(io.BytesIO(SAMPLE), b"")) == []

    @given(
        data=st.binary(max_size=200),
        pattern=st.binary(min_size=1, max_size=4),
    )
    def test_find_all_agrees_with_reference(self, data: bytes, pattern: bytes) -> None:
        """Find all reports every non-overlapping occurrence in order."""
        assert list(find_all(io.BytesIO(data), pattern)) == reference_find_all(data, pattern)

    @given(
        chunks=st.lists(st.sampled_from([b"a", b"b", b"ab"]), max_size=50),
        pattern=st.sampled_from([b"ab", b"aab", b"ba", b"bab"]),
    )
    def test_find_all_on_repetitive_data(self, chunks: list[bytes], pattern: bytes) -> None:
        """Repetitive data exercises restarts after partial matches."""
        data = b"".join(chunks)

        assert list(find_all(io.BytesIO(data), pattern)) == reference_find_all(data, pattern)
