"""Reader/Writer/Closer building blocks and the full-transfer helpers.

Brief:
  Socket classes implement read_into(), write() and close(); the mixins here
  build read(), read_full(), read_line() and write_full() on top of them so
  plain, datagram and TLS sockets share one implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from . import errors

_NEWLINE = 0x0A


class Closer(ABC):
    @abstractmethod
    def close(self) -> None:
        """Release the underlying descriptor; safe to call more than once."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Reader(ABC):
    @abstractmethod
    def read_into(self, buffer) -> int:
        """
        Read at most len(buffer) bytes into buffer.

        Inputs:
          - buffer: Writable bytes-like object.
        Outputs:
          - int: Number of bytes read (> 0 for stream sockets).

        Raises:
          - errors.NetError: EOF on orderly shutdown, TIMEDOUT when the
            configured timeout elapses, OS-classified errors otherwise.
        """

    def read(self, size: int) -> bytes:
        """Read at most size bytes with a single read_into() call."""
        if size < 0:
            raise errors.NetError(errors.ILLEGAL_ARGUMENT)
        buf = bytearray(size)
        n = self.read_into(buf)
        return bytes(buf[:n])

    def read_full(self, size: int) -> bytes:
        """
        Read exactly size bytes.

        Inputs:
          - size: Number of bytes required.
        Outputs:
          - bytes: Exactly size bytes.

        Raises:
          - errors.NetError: Any read error, including EOF when the peer closes
            before size bytes arrived.

        Example:
          >>> sock.read_full(8)
          b'message\\x00'
        """
        if size < 0:
            raise errors.NetError(errors.ILLEGAL_ARGUMENT)
        buf = bytearray(size)
        view = memoryview(buf)
        offset = 0
        while offset < size:
            offset += self.read_into(view[offset:])
        return bytes(buf)

    def read_line(self, size: int) -> bytes:
        """
        Read one line of at most size - 1 bytes.

        Inputs:
          - size: Capacity of the caller's line buffer; one byte is reserved
            for a terminator, so at most size - 1 bytes are returned.
        Outputs:
          - bytes: Data up to and including b"\\n", or a truncated chunk of
            size - 1 bytes when no newline arrived first.

        Raises:
          - errors.NetError: EOF when the peer closed before any byte of the
            line was read; a partial line before EOF is returned first.
        """
        if size < 1:
            raise errors.NetError(errors.ILLEGAL_ARGUMENT)
        limit = size - 1
        line = bytearray()
        one = bytearray(1)
        while len(line) < limit:
            try:
                self.read_into(one)
            except errors.NetError as e:
                if e.error == errors.EOF and line:
                    break
                raise
            line += one
            if one[0] == _NEWLINE:
                break
        return bytes(line)


class Writer(ABC):
    @abstractmethod
    def write(self, data) -> int:
        """Write some of data; returns the number of bytes accepted."""

    def write_full(self, data) -> None:
        """
        Write all of data, looping over partial writes.

        Inputs:
          - data: Bytes-like object.
        Outputs:
          - None; raises errors.NetError on the first failed write.
        """
        view = memoryview(data).cast("B")
        while view:
            n = self.write(view)
            view = view[n:]


class ReadWriteCloser(Reader, Writer, Closer):
    pass
