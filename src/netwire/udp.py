"""Connectionless (UDP) sockets with the same deadline discipline as TCP."""

from __future__ import annotations

import logging
import socket
from typing import Callable, Optional, Tuple

from . import errors
from .backends import Event, SocketBackend
from .config.settings import SocketSettings
from .deadline import Deadline
from .handle import SocketHandle
from .resolver import lookup_address
from .runtime import ensure_initialized
from .stream import ReadWriteCloser

logger = logging.getLogger(__name__)


class UDPSocket(SocketHandle, ReadWriteCloser):
    """
    A datagram socket with an optional default peer.

    Inputs:
      - sock: Datagram socket.
      - backend: SocketBackend.
      - remote_address/remote_port: Default peer used by write(); None for a
        listening socket.
    Outputs:
      - UDPSocket supporting read/read_from, write/write_to and set_timeout.

    Notes:
      - Unlike TCP, a zero-length datagram is returned as 0 bytes rather than
        EOF; datagram sockets have no orderly shutdown.
    """

    def __init__(
        self,
        sock: socket.socket,
        backend: SocketBackend,
        remote_address: Optional[str] = None,
        remote_port: Optional[int] = None,
    ) -> None:
        super().__init__(sock, backend)
        self._remote_address = remote_address
        self._remote_port = remote_port

    @property
    def remote_address(self) -> Optional[str]:
        return self._remote_address

    @property
    def remote_port(self) -> Optional[int]:
        return self._remote_port

    @property
    def address(self) -> Tuple[str, int]:
        self._check_open()
        host, port = self._sock.getsockname()[:2]
        return host, port

    def read_into(self, buffer) -> int:
        self._check_open()
        if len(buffer) == 0:
            return 0
        self._backend.wait_ready(self._sock, Event.READ, Deadline(self._timeout_ms))
        return self._backend.read_into(self._sock, buffer)

    def read_from(self, size: int) -> Tuple[bytes, str, int]:
        """
        Receive one datagram and its sender.

        Inputs:
          - size: Maximum datagram size to accept.
        Outputs:
          - (data, address, port)
        """
        self._check_open()
        if size <= 0:
            raise errors.NetError(errors.ILLEGAL_ARGUMENT)
        buf = bytearray(size)
        self._backend.wait_ready(self._sock, Event.READ, Deadline(self._timeout_ms))
        n, (address, port) = self._backend.read_from(self._sock, buf)
        return bytes(buf[:n]), address, port

    def write(self, data) -> int:
        if self._remote_address is None or self._remote_port is None:
            self._check_open()
            raise errors.NetError(errors.ILLEGAL_STATE)
        return self.write_to(data, self._remote_address, self._remote_port)

    def write_to(self, data, address: str, port: int) -> int:
        """Send one datagram to address:port; returns bytes sent."""
        self._check_open()
        self._backend.wait_ready(self._sock, Event.WRITE, Deadline(self._timeout_ms))
        return self._backend.write_to(self._sock, data, (address, int(port)))

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        peer = (
            f"{self._remote_address}:{self._remote_port}"
            if self._remote_address is not None
            else "unbound-peer"
        )
        return f"<UDPSocket {peer} {state}>"


def connect_udp(
    host: str,
    port: int,
    *,
    settings: Optional[SocketSettings] = None,
    backend: Optional[SocketBackend] = None,
    resolve: Callable[[str], str] = lookup_address,
) -> UDPSocket:
    """
    Create a datagram socket whose write() targets host:port.

    Inputs:
      - host: Hostname or IPv4 literal (resolved once, here).
      - port: Remote port.
      - settings: Optional SocketSettings; io_timeout_ms becomes the timeout.
    Outputs:
      - UDPSocket with a default peer.
    """
    backend = ensure_initialized(backend)
    ip = resolve(host)
    sock = backend.create(socket.AF_INET, socket.SOCK_DGRAM)
    udp = UDPSocket(sock, backend, ip, int(port))
    if settings is not None and settings.io_timeout_ms > 0:
        udp.set_timeout(settings.io_timeout_ms)
    return udp


def listen_udp(
    port: int,
    *,
    host: Optional[str] = None,
    settings: Optional[SocketSettings] = None,
    backend: Optional[SocketBackend] = None,
) -> UDPSocket:
    """
    Create a datagram socket bound to host:port.

    Inputs:
      - port: Local port (0 for ephemeral; see UDPSocket.address).
      - host: Local address; "" binds every interface. Defaults to
        settings.bind_host.
      - settings: Optional SocketSettings; io_timeout_ms becomes the timeout.
    Outputs:
      - UDPSocket without a default peer.
    """
    settings = settings or SocketSettings()
    if host is None:
        host = settings.bind_host
    backend = ensure_initialized(backend)
    sock = backend.create(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind((host, int(port)))
    except OSError as e:
        sock.close()
        raise errors.from_exception(e) from e
    udp = UDPSocket(sock, backend)
    if settings.io_timeout_ms > 0:
        udp.set_timeout(settings.io_timeout_ms)
    return udp
