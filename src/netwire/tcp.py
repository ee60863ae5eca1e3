"""TCP connection establishment and deadline-bounded stream I/O.

Brief:
  connect_tcp() drives a non-blocking connect() to completion inside a
  millisecond budget; TCPSocket and TCPListener apply the same budget
  discipline to read, write and accept.

Inputs:
  - Host/port pairs and millisecond timeouts.

Outputs:
  - TCPSocket / TCPListener objects; failures raise errors.NetError.
"""

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


class TCPSocket(SocketHandle, ReadWriteCloser):
    """
    A connected stream socket.

    Inputs:
      - sock: Connected socket (blocking mode).
      - remote_address: Peer IPv4 address.
      - remote_port: Peer port.
      - backend: SocketBackend.
    Outputs:
      - TCPSocket supporting read_into/read/read_full/read_line,
        write/write_full, set_timeout and close.

    Example:
      >>> with connect_tcp("127.0.0.1", 8080, 1000) as conn:
      ...     conn.write_full(b"message\\x00")
    """

    def __init__(
        self,
        sock: socket.socket,
        remote_address: str,
        remote_port: int,
        backend: SocketBackend,
    ) -> None:
        super().__init__(sock, backend)
        self._remote_address = remote_address
        self._remote_port = int(remote_port)

    @property
    def remote_address(self) -> str:
        return self._remote_address

    @property
    def remote_port(self) -> int:
        return self._remote_port

    def read_into(self, buffer) -> int:
        self._check_open()
        if len(buffer) == 0:
            return 0
        self._backend.wait_ready(self._sock, Event.READ, Deadline(self._timeout_ms))
        n = self._backend.read_into(self._sock, buffer)
        if n == 0:
            raise errors.NetError(errors.EOF)
        return n

    def write(self, data) -> int:
        self._check_open()
        if len(data) == 0:
            return 0
        self._backend.wait_ready(self._sock, Event.WRITE, Deadline(self._timeout_ms))
        return self._backend.write(self._sock, data)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<TCPSocket {self._remote_address}:{self._remote_port} {state}>"


class TCPListener(SocketHandle):
    """
    A listening stream socket producing TCPSocket connections.

    Inputs:
      - sock: Bound, listening socket.
      - backend: SocketBackend.
      - io_timeout_ms: Timeout given to each accepted connection (<= 0 blocks).
    Outputs:
      - TCPListener with accept(), set_timeout(), close() and address/port.
    """

    def __init__(
        self, sock: socket.socket, backend: SocketBackend, io_timeout_ms: int = 0
    ) -> None:
        super().__init__(sock, backend)
        self.io_timeout_ms = io_timeout_ms

    @property
    def address(self) -> Tuple[str, int]:
        self._check_open()
        host, port = self._sock.getsockname()[:2]
        return host, port

    @property
    def port(self) -> int:
        return self.address[1]

    def accept(self) -> TCPSocket:
        """
        Accept one connection.

        Inputs:
          - None
        Outputs:
          - TCPSocket in blocking mode carrying the peer address and port.

        Raises:
          - errors.NetError: TIMEDOUT when a positive timeout elapses with no
            pending connection; OS-classified accept errors otherwise.
        """
        self._check_open()
        self._backend.wait_ready(self._sock, Event.READ, Deadline(self._timeout_ms))
        client, (address, port) = self._backend.accept(self._sock)
        try:
            # Accepted sockets inherit O_NONBLOCK on some platforms.
            self._backend.set_blocking(client, True)
        except errors.NetError:
            client.close()
            raise
        logger.debug("accepted %s:%d", address, port)
        conn = TCPSocket(client, address, port, self._backend)
        if self.io_timeout_ms > 0:
            conn.set_timeout(self.io_timeout_ms)
        return conn

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<TCPListener {state}>"


def _connect_with_deadline(
    backend: SocketBackend,
    sock: socket.socket,
    address: Tuple[str, int],
    deadline: Deadline,
) -> None:
    """
    Drive a non-blocking connect() to completion within deadline.

    Inputs:
      - backend: SocketBackend.
      - sock: Freshly created socket.
      - address: (ip, port) to connect to.
      - deadline: Non-blocking Deadline started before resolution.
    Outputs:
      - None on success (socket left in blocking mode); raises errors.NetError.
    """
    backend.set_blocking(sock, False)
    rc = backend.start_connect(sock, address)
    if rc != 0 and rc not in backend.connect_pending_codes:
        raise errors.os_error(rc)

    while rc != 0:
        # Each wait gets only what is left of the budget, so repeated
        # "still in progress" wakeups cannot extend the total wait.
        if not backend.poll(sock, Event.WRITE, deadline.remaining_ms()):
            raise errors.NetError(errors.TIMEDOUT)
        so_error = backend.pending_error(sock)
        if so_error in backend.connect_pending_codes:
            if deadline.expired():
                raise errors.NetError(errors.TIMEDOUT)
            continue
        if so_error == 0 or so_error in backend.already_connected_codes:
            break
        raise errors.os_error(so_error)

    backend.set_blocking(sock, True)


def connect_tcp(
    host: str,
    port: int,
    timeout_ms: Optional[int] = None,
    *,
    settings: Optional[SocketSettings] = None,
    backend: Optional[SocketBackend] = None,
    resolve: Callable[[str], str] = lookup_address,
) -> TCPSocket:
    """
    Open a TCP connection to host:port within timeout_ms.

    Inputs:
      - host: Hostname or IPv4 literal.
      - port: Remote port.
      - timeout_ms: Connect budget in milliseconds; 0 or negative performs a
        single blocking connect() and never reports TIMEDOUT itself. None
        takes settings.connect_timeout_ms, or blocks without settings.
      - settings: Optional SocketSettings; io_timeout_ms becomes the new
        connection's read/write timeout.
      - backend: Optional SocketBackend (defaults to the platform backend).
      - resolve: Hostname lookup; its errors propagate unchanged.
    Outputs:
      - TCPSocket, blocking unless settings carry a positive io_timeout_ms.

    Raises:
      - errors.NetError: resolver errors, socket creation errors, immediate
        connect errors, poll errors, TIMEDOUT, or the pending SO_ERROR.

    Example:
      >>> conn = connect_tcp("localhost", 8080, 1000)
    """
    if timeout_ms is None:
        timeout_ms = settings.connect_timeout_ms if settings is not None else 0
    backend = ensure_initialized(backend)
    deadline = Deadline(timeout_ms)

    ip = resolve(host)
    sock = backend.create(socket.AF_INET, socket.SOCK_STREAM)
    address = (ip, int(port))
    try:
        if deadline.blocking:
            backend.connect(sock, address)
        else:
            _connect_with_deadline(backend, sock, address, deadline)
    except BaseException as e:
        logger.debug("connect to %s:%s failed: %s", ip, port, e)
        sock.close()
        raise

    logger.debug(
        "connected to %s:%s in %.1fms", ip, port, deadline.elapsed_ms()
    )
    conn = TCPSocket(sock, ip, int(port), backend)
    if settings is not None and settings.io_timeout_ms > 0:
        conn.set_timeout(settings.io_timeout_ms)
    return conn


def listen_tcp(
    port: int,
    *,
    host: Optional[str] = None,
    backlog: Optional[int] = None,
    reuse_address: Optional[bool] = None,
    settings: Optional[SocketSettings] = None,
    backend: Optional[SocketBackend] = None,
) -> TCPListener:
    """
    Bind and listen on host:port.

    Inputs:
      - port: Local port (0 picks an ephemeral port; see TCPListener.port).
      - host: Local address; "" binds every interface.
      - backlog: listen() backlog.
      - reuse_address: Set SO_REUSEADDR before binding.
      - settings: SocketSettings supplying bind_host, backlog, reuse_address,
        accept_timeout_ms and io_timeout_ms; explicit arguments win.
      - backend: Optional SocketBackend.
    Outputs:
      - TCPListener; accept() honours accept_timeout_ms and accepted
        connections start with io_timeout_ms.
    """
    settings = settings or SocketSettings()
    host = settings.bind_host if host is None else host
    backlog = settings.backlog if backlog is None else backlog
    if reuse_address is None:
        reuse_address = settings.reuse_address

    backend = ensure_initialized(backend)
    sock = backend.create(socket.AF_INET, socket.SOCK_STREAM)
    try:
        if reuse_address:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, int(port)))
        sock.listen(backlog)
    except OSError as e:
        sock.close()
        raise errors.from_exception(e) from e
    except BaseException:
        sock.close()
        raise
    listener = TCPListener(sock, backend, io_timeout_ms=settings.io_timeout_ms)
    if settings.accept_timeout_ms > 0:
        listener.set_timeout(settings.accept_timeout_ms)
    logger.debug("listening on %s:%d", host or "0.0.0.0", listener.port)
    return listener
