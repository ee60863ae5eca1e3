"""Exclusive ownership of one socket descriptor with an idempotent close."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Optional

from . import errors
from .backends import SocketBackend
from .stream import Closer

logger = logging.getLogger(__name__)


class SocketHandle(Closer):
    """
    Base for every netwire socket object.

    Inputs:
      - sock: Connected/bound socket, owned exclusively from now on.
      - backend: SocketBackend used for all calls on sock.
      - timeout_ms: Initial per-operation timeout (<= 0 blocks).
    Outputs:
      - Handle with close(), set_timeout(), closed and fileno().

    Brief: The closed flag is a non-blocking lock acquisition, so concurrent
    close() calls race safely and exactly one of them closes the descriptor.
    """

    def __init__(
        self, sock: socket.socket, backend: SocketBackend, timeout_ms: int = 0
    ) -> None:
        self._sock = sock
        self._backend = backend
        self._timeout_ms = timeout_ms
        self._close_flag = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._close_flag.locked()

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def backend(self) -> SocketBackend:
        return self._backend

    def fileno(self) -> int:
        return -1 if self.closed else self._sock.fileno()

    def _check_open(self) -> None:
        if self.closed:
            raise errors.NetError(errors.ILLEGAL_STATE)

    def set_timeout(self, timeout_ms: int) -> None:
        """
        Set the timeout applied to each subsequent operation.

        Inputs:
          - timeout_ms: Milliseconds; 0 or negative blocks indefinitely.
        Outputs:
          - None

        Notes:
          - A positive timeout keeps the descriptor non-blocking and every
            operation polls for readiness first; a non-positive timeout puts
            it back into blocking mode.
        """
        self._check_open()
        self._backend.set_blocking(self._sock, timeout_ms <= 0)
        self._timeout_ms = timeout_ms

    def close(self) -> None:
        if not self._close_flag.acquire(blocking=False):
            return
        logger.debug("closing %r", self)
        self._backend.close(self._sock)

    def detach(self) -> socket.socket:
        """Hand the socket to a new owner without closing it."""
        if not self._close_flag.acquire(blocking=False):
            raise errors.NetError(errors.ILLEGAL_STATE)
        return self._sock

    def __del__(self) -> None:
        flag: Optional[threading.Lock] = getattr(self, "_close_flag", None)
        if flag is None or flag.locked():
            return
        try:
            self.close()
        except errors.NetError as e:
            logger.warning("close during teardown failed: %s", e)
