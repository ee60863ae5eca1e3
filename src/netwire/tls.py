"""TLS sessions layered over netwire TCP connections.

Brief:
  connect_tls() establishes a plain connection with connect_tcp(), hands the
  descriptor to the ssl module and runs the handshake inside what is left of
  the same deadline. listen_tls() wraps a TCPListener so every accepted
  connection completes a server-side handshake before it is returned.
  TLSSocket keeps the TCPSocket error contract: EOF on orderly close,
  TIMEDOUT on an expired timeout, OS-classified errors otherwise.
"""

from __future__ import annotations

import logging
import ssl
from typing import Callable, Optional, Tuple

from . import errors
from .backends import Event, SocketBackend
from .config.settings import SocketSettings, TLSConfig
from .deadline import Deadline
from .resolver import lookup_address
from .runtime import ensure_initialized
from .stream import Closer
from .tcp import TCPListener, TCPSocket, connect_tcp, listen_tcp

logger = logging.getLogger(__name__)


def build_client_context(config: TLSConfig) -> ssl.SSLContext:
    """
    Build an SSLContext for client connections.

    Inputs:
      - config: TLSConfig; ca_file selects trust roots (platform defaults when
        omitted) unless insecure_skip_verify disables verification.
    Outputs:
      - ssl.SSLContext configured for client use.

    Raises:
      - errors.NetError: NOENT for a missing ca_file, tls kind for bad PEM.
    """
    try:
        if config.insecure_skip_verify:
            ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        else:
            ctx = ssl.create_default_context(cafile=config.ca_file)
            ctx.check_hostname = config.check_hostname
        ctx.minimum_version = config.tls_min_version()
    except OSError as e:
        raise errors.from_exception(e) from e
    return ctx


def build_server_context(config: TLSConfig) -> ssl.SSLContext:
    """
    Build an SSLContext for a listener from cert_file and key_file.

    Inputs:
      - config: TLSConfig with cert_file and key_file set.
    Outputs:
      - ssl.SSLContext configured for server use.

    Raises:
      - errors.NetError: ILLEGAL_ARGUMENT when either file is missing from the
        config, NOENT when a file does not exist, tls kind when the key does
        not match the certificate.
    """
    if not config.cert_file or not config.key_file:
        raise errors.NetError(errors.ILLEGAL_ARGUMENT)
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    try:
        ctx.minimum_version = config.tls_min_version()
        ctx.load_cert_chain(certfile=config.cert_file, keyfile=config.key_file)
    except OSError as e:
        raise errors.from_exception(e) from e
    return ctx


def _handshake(
    tls_sock: ssl.SSLSocket, backend: SocketBackend, deadline: Deadline
) -> None:
    while True:
        try:
            tls_sock.do_handshake()
            return
        except ssl.SSLWantReadError:
            backend.wait_ready(tls_sock, Event.READ, deadline)
        except ssl.SSLWantWriteError:
            backend.wait_ready(tls_sock, Event.WRITE, deadline)
        except OSError as e:
            raise errors.from_exception(e) from e


class TLSSocket(TCPSocket):
    """
    A TCP connection carrying a completed TLS session.

    Inputs:
      - sock: ssl.SSLSocket after a successful handshake (blocking mode).
      - remote_address/remote_port: Peer of the underlying connection.
      - backend: SocketBackend used for readiness waits.
    Outputs:
      - TLSSocket with the same read/write/close surface as TCPSocket.
    """

    def cipher(self) -> Optional[Tuple[str, str, int]]:
        self._check_open()
        return self._sock.cipher()

    def version(self) -> Optional[str]:
        self._check_open()
        return self._sock.version()

    def getpeercert(self, binary_form: bool = False):
        self._check_open()
        return self._sock.getpeercert(binary_form=binary_form)

    def read_into(self, buffer) -> int:
        self._check_open()
        if len(buffer) == 0:
            return 0
        deadline = Deadline(self._timeout_ms)
        # Decrypted bytes already buffered by the TLS library are readable
        # even when the descriptor is not.
        if not self._sock.pending():
            self._backend.wait_ready(self._sock, Event.READ, deadline)
        while True:
            try:
                n = self._sock.recv_into(buffer)
            except ssl.SSLWantReadError:
                self._backend.wait_ready(self._sock, Event.READ, deadline)
                continue
            except ssl.SSLWantWriteError:
                self._backend.wait_ready(self._sock, Event.WRITE, deadline)
                continue
            except OSError as e:
                raise errors.from_exception(e) from e
            if n == 0:
                raise errors.NetError(errors.EOF)
            return n

    def write(self, data) -> int:
        self._check_open()
        if len(data) == 0:
            return 0
        deadline = Deadline(self._timeout_ms)
        self._backend.wait_ready(self._sock, Event.WRITE, deadline)
        while True:
            try:
                return self._sock.send(data)
            except ssl.SSLWantWriteError:
                self._backend.wait_ready(self._sock, Event.WRITE, deadline)
            except ssl.SSLWantReadError:
                self._backend.wait_ready(self._sock, Event.READ, deadline)
            except OSError as e:
                raise errors.from_exception(e) from e

    def close(self) -> None:
        """Send close_notify, then close the transport. Idempotent."""
        if not self._close_flag.acquire(blocking=False):
            return
        try:
            # Non-blocking so the shutdown sends close_notify without waiting
            # for the peer's reply.
            self._sock.setblocking(False)
            self._sock.unwrap()
        except (ssl.SSLError, OSError, ValueError) as e:
            logger.debug("TLS shutdown with %s:%d incomplete: %s",
                         self._remote_address, self._remote_port, e)
        self._backend.close(self._sock)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<TLSSocket {self._remote_address}:{self._remote_port} {state}>"


def _secure(
    tcp: TCPSocket,
    ctx: ssl.SSLContext,
    backend: SocketBackend,
    deadline: Deadline,
    *,
    server_side: bool,
    server_hostname: Optional[str] = None,
    require_peer_cert: bool = False,
) -> TLSSocket:
    """
    Take over tcp's descriptor and complete a TLS handshake on it.

    Inputs:
      - tcp: Connected TCPSocket; ownership moves to the returned TLSSocket.
      - ctx: Client or server SSLContext.
      - backend: SocketBackend.
      - deadline: Budget for the handshake (blocking deadlines block).
      - server_side: True for the accept side.
      - server_hostname: SNI / verification name (client side).
      - require_peer_cert: Require a verified peer certificate.
    Outputs:
      - TLSSocket in blocking mode.
    """
    raw = tcp.detach()
    try:
        backend.set_blocking(raw, deadline.blocking)
        tls_sock = ctx.wrap_socket(
            raw,
            server_side=server_side,
            server_hostname=None if server_side else server_hostname,
            do_handshake_on_connect=False,
        )
    except OSError as e:
        raw.close()
        raise errors.from_exception(e) from e
    except BaseException:
        raw.close()
        raise

    try:
        _handshake(tls_sock, backend, deadline)
        if require_peer_cert and not tls_sock.getpeercert(binary_form=True):
            raise errors.NetError(errors.CERTIFICATE)
        backend.set_blocking(tls_sock, True)
    except BaseException as e:
        logger.debug(
            "TLS handshake with %s:%d failed: %s", tcp.remote_address, tcp.remote_port, e
        )
        tls_sock.close()
        raise

    logger.debug(
        "TLS %s established with %s:%d (%s)",
        "accept" if server_side else "connect",
        tcp.remote_address,
        tcp.remote_port,
        tls_sock.version(),
    )
    return TLSSocket(tls_sock, tcp.remote_address, tcp.remote_port, backend)


def connect_tls(
    host: str,
    port: int,
    timeout_ms: Optional[int] = None,
    config: Optional[TLSConfig] = None,
    *,
    settings: Optional[SocketSettings] = None,
    backend: Optional[SocketBackend] = None,
    resolve: Callable[[str], str] = lookup_address,
) -> TLSSocket:
    """
    Open a TLS connection to host:port.

    Inputs:
      - host: Hostname or IPv4 literal.
      - port: Remote port.
      - timeout_ms: Budget covering both connect and handshake (<= 0 blocks);
        None takes settings.connect_timeout_ms, or blocks without settings.
      - config: TLSConfig (defaults verify against platform trust roots).
      - settings: Optional SocketSettings; io_timeout_ms applies to the
        established session.
      - backend: Optional SocketBackend.
      - resolve: Hostname lookup.
    Outputs:
      - TLSSocket, blocking unless settings carry a positive io_timeout_ms.

    Raises:
      - errors.NetError: connect_tcp() errors, tls kind handshake errors, and
        CERTIFICATE when verification is enabled and the peer presents no
        certificate or its chain does not verify.

    Example:
      >>> conn = connect_tls("example.com", 443, 2000)
    """
    if timeout_ms is None:
        timeout_ms = settings.connect_timeout_ms if settings is not None else 0
    config = config or TLSConfig()
    backend = ensure_initialized(backend)
    ctx = build_client_context(config)

    deadline = Deadline(timeout_ms)
    tcp = connect_tcp(host, port, timeout_ms, backend=backend, resolve=resolve)
    try:
        conn = _secure(
            tcp,
            ctx,
            backend,
            deadline,
            server_side=False,
            server_hostname=config.server_hostname or host,
            require_peer_cert=not config.insecure_skip_verify,
        )
    finally:
        tcp.close()
    if settings is not None and settings.io_timeout_ms > 0:
        conn.set_timeout(settings.io_timeout_ms)
    return conn


class TLSListener(Closer):
    """
    A TCP listener whose accepted connections complete a TLS handshake.

    Inputs:
      - listener: Listening TCPListener (owned).
      - ctx: Server SSLContext.
    Outputs:
      - TLSListener with accept(), set_timeout(), close() and address/port.
    """

    def __init__(self, listener: TCPListener, ctx: ssl.SSLContext) -> None:
        self._tcp = listener
        self._ctx = ctx

    @property
    def closed(self) -> bool:
        return self._tcp.closed

    @property
    def timeout_ms(self) -> int:
        return self._tcp.timeout_ms

    @property
    def address(self) -> Tuple[str, int]:
        return self._tcp.address

    @property
    def port(self) -> int:
        return self._tcp.port

    def fileno(self) -> int:
        return self._tcp.fileno()

    def set_timeout(self, timeout_ms: int) -> None:
        """Timeout for accept(); the handshake gets the same budget."""
        self._tcp.set_timeout(timeout_ms)

    def accept(self) -> TLSSocket:
        """
        Accept one connection and complete the server-side handshake.

        Inputs:
          - None
        Outputs:
          - TLSSocket; a failed handshake closes the connection and raises.
        """
        tcp = self._tcp.accept()
        deadline = Deadline(self._tcp.timeout_ms)
        try:
            conn = _secure(tcp, self._ctx, self._tcp.backend, deadline, server_side=True)
        finally:
            tcp.close()
        if self._tcp.io_timeout_ms > 0:
            conn.set_timeout(self._tcp.io_timeout_ms)
        return conn

    def close(self) -> None:
        self._tcp.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<TLSListener {state}>"


def listen_tls(
    port: int,
    config: TLSConfig,
    *,
    host: Optional[str] = None,
    backlog: Optional[int] = None,
    settings: Optional[SocketSettings] = None,
    backend: Optional[SocketBackend] = None,
) -> TLSListener:
    """
    Listen for TLS connections on host:port.

    Inputs:
      - port: Local port (0 for ephemeral).
      - config: TLSConfig with cert_file and key_file.
      - host: Local address; "" binds every interface.
      - backlog: listen() backlog.
      - settings: SocketSettings forwarded to listen_tcp(); accept_timeout_ms
        also bounds each handshake.
      - backend: Optional SocketBackend.
    Outputs:
      - TLSListener.

    Raises:
      - errors.NetError: Context errors (raised before any socket is bound),
        then listen_tcp() errors.
    """
    ctx = build_server_context(config)
    listener = listen_tcp(
        port, host=host, backlog=backlog, settings=settings, backend=backend
    )
    return TLSListener(listener, ctx)
