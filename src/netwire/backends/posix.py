import errno
import logging
import select
import signal
import socket
import threading

from .. import errors
from ..deadline import poll_timeout
from .base import Event, SocketBackend

logger = logging.getLogger(__name__)

_READ_MASK = select.POLLIN | select.POLLPRI if hasattr(select, "poll") else 0
_WRITE_MASK = select.POLLOUT if hasattr(select, "poll") else 0


class PosixBackend(SocketBackend):
    """
    Backend for POSIX systems: readiness via poll(), errno error table.

    Inputs:
      - None
    Outputs:
      - SocketBackend implementation.

    Brief: poll() always reports POLLERR/POLLHUP, so a failed non-blocking
    connect wakes the writability wait and is then read back via SO_ERROR.
    """

    name = "posix"
    os_errors = errors.POSIX_OS_ERRORS
    connect_pending_codes = frozenset({errno.EINPROGRESS, errno.EALREADY, errno.EINTR})
    already_connected_codes = frozenset({errno.EISCONN})

    def initialize(self) -> None:
        """Ignore SIGPIPE so writes to a reset peer fail with EPIPE instead."""
        if not hasattr(signal, "SIGPIPE"):
            return
        if threading.current_thread() is not threading.main_thread():
            # signal.signal() is main-thread only; CPython ignores SIGPIPE at
            # startup anyway.
            logger.debug("SIGPIPE disposition left unchanged (not main thread)")
            return
        if signal.getsignal(signal.SIGPIPE) != signal.SIG_IGN:
            signal.signal(signal.SIGPIPE, signal.SIG_IGN)
            logger.debug("SIGPIPE ignored")

    def poll(self, sock: socket.socket, event: Event, timeout_ms: float) -> bool:
        poller = select.poll()
        poller.register(sock.fileno(), _READ_MASK if event is Event.READ else _WRITE_MASK)
        try:
            ready = poller.poll(poll_timeout(timeout_ms))
        except OSError as e:
            raise errors.from_exception(e) from e
        return bool(ready)
