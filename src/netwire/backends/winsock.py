import logging
import select
import socket

from .. import errors
from ..deadline import select_timeout
from .base import Event, SocketBackend

logger = logging.getLogger(__name__)


class WinsockBackend(SocketBackend):
    """
    Backend for Windows sockets: readiness via select(), Winsock error table.

    Inputs:
      - None
    Outputs:
      - SocketBackend implementation.

    Brief: Winsock signals a failed non-blocking connect through the
    exceptional set rather than writability, so every wait watches it and
    surfaces the pending SO_ERROR as soon as it fires.
    """

    name = "winsock"
    os_errors = errors.WINSOCK_OS_ERRORS
    connect_pending_codes = frozenset(
        {errors.WSAEWOULDBLOCK, errors.WSAEINPROGRESS, errors.WSAEALREADY}
    )
    already_connected_codes = frozenset({errors.WSAEISCONN})

    def initialize(self) -> None:
        # WSAStartup is performed by the socket module when it is imported.
        logger.debug("winsock already started by the socket module")

    def shutdown(self) -> None:
        logger.debug("winsock cleanup left to the socket module")

    def poll(self, sock: socket.socket, event: Event, timeout_ms: float) -> bool:
        readfds = [sock] if event is Event.READ else []
        writefds = [sock] if event is Event.WRITE else []
        try:
            r, w, x = select.select(
                readfds, writefds, [sock], select_timeout(timeout_ms)
            )
        except (OSError, ValueError) as e:
            raise errors.from_exception(e) from e
        if not (r or w or x):
            return False
        if x:
            so_error = self.pending_error(sock)
            if so_error:
                raise errors.os_error(so_error)
        return True
