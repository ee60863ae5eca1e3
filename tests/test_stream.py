"""
Brief: Tests for the Reader/Writer helpers shared by every socket type.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from netwire import errors
from netwire.stream import ReadWriteCloser


class _ScriptedStream(ReadWriteCloser):
    """In-memory stream returning at most `chunk` bytes per read_into()."""

    def __init__(self, data=b"", chunk=3, write_limit=2):
        self._data = bytearray(data)
        self._chunk = chunk
        self._write_limit = write_limit
        self.written = bytearray()
        self.write_calls = 0
        self.closed = False

    def read_into(self, buffer):
        if not self._data:
            raise errors.NetError(errors.EOF)
        n = min(len(buffer), self._chunk, len(self._data))
        buffer[:n] = self._data[:n]
        del self._data[:n]
        return n

    def write(self, data):
        self.write_calls += 1
        n = min(len(data), self._write_limit)
        self.written += bytes(data[:n])
        return n

    def close(self):
        self.closed = True


def test_read_full_loops_over_short_reads():
    """
    Brief: read_full collects exactly the requested size over partial reads.

    Inputs:
      - None

    Outputs:
      - None: Asserts bytes returned
    """
    s = _ScriptedStream(b"message\x00rest", chunk=3)
    assert s.read_full(8) == b"message\x00"
    assert s.read(10) == b"res"


def test_read_full_raises_eof_when_peer_closes_early():
    """
    Brief: read_full reports EOF when fewer bytes than requested arrive.

    Inputs:
      - None

    Outputs:
      - None: Asserts EOF
    """
    s = _ScriptedStream(b"abc")
    with pytest.raises(errors.NetError) as ei:
        s.read_full(8)
    assert ei.value.error == errors.EOF


def test_read_line_stops_after_newline():
    """
    Brief: read_line returns through the newline and leaves the rest unread.

    Inputs:
      - None

    Outputs:
      - None: Asserts line boundaries
    """
    s = _ScriptedStream(b"hello\nworld\n")
    assert s.read_line(64) == b"hello\n"
    assert s.read_line(64) == b"world\n"


def test_read_line_truncates_to_size_minus_one():
    """
    Brief: read_line reserves one byte of the caller's capacity.

    Inputs:
      - None

    Outputs:
      - None: Asserts truncated chunk and remaining data
    """
    s = _ScriptedStream(b"abcdefgh\n")
    assert s.read_line(5) == b"abcd"
    assert s.read_line(64) == b"efgh\n"


def test_read_line_partial_then_eof():
    """
    Brief: A partial line before EOF is returned; the next call raises EOF.

    Inputs:
      - None

    Outputs:
      - None: Asserts partial data then EOF
    """
    s = _ScriptedStream(b"tail")
    assert s.read_line(64) == b"tail"
    with pytest.raises(errors.NetError) as ei:
        s.read_line(64)
    assert ei.value.error == errors.EOF


def test_invalid_sizes_are_illegal_arguments():
    """
    Brief: Negative sizes and a zero line capacity are rejected.

    Inputs:
      - None

    Outputs:
      - None: Asserts ILLEGAL_ARGUMENT
    """
    s = _ScriptedStream(b"x")
    for call in (lambda: s.read(-1), lambda: s.read_full(-1), lambda: s.read_line(0)):
        with pytest.raises(errors.NetError) as ei:
            call()
        assert ei.value.error == errors.ILLEGAL_ARGUMENT


def test_write_full_loops_over_partial_writes():
    """
    Brief: write_full keeps writing until every byte is accepted.

    Inputs:
      - None

    Outputs:
      - None: Asserts written bytes and call count
    """
    s = _ScriptedStream(write_limit=2)
    s.write_full(b"message\x00")
    assert bytes(s.written) == b"message\x00"
    assert s.write_calls == 4


def test_context_manager_closes():
    """
    Brief: Closer works as a context manager.

    Inputs:
      - None

    Outputs:
      - None: Asserts close() called on exit
    """
    with _ScriptedStream() as s:
        pass
    assert s.closed
