"""Platform socket backend interface.

Brief:
  A backend owns every call that differs between POSIX and Winsock: the
  readiness wait, the codes a non-blocking connect reports while it is still
  pending, the OS error table, and one-time process setup. The connection
  engine and the socket objects only talk to this interface.
"""

from __future__ import annotations

import enum
import logging
import socket
from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Tuple

from .. import errors
from ..deadline import Deadline

logger = logging.getLogger(__name__)


class Event(enum.Enum):
    READ = "read"
    WRITE = "write"


class SocketBackend(ABC):
    """
    Abstract socket backend.

    Inputs:
      - None
    Outputs:
      - Backend instance used by netwire.tcp, netwire.udp and netwire.tls.

    Notes:
      - All methods raise errors.NetError; raw OSError never escapes.
    """

    name = "abstract"
    os_errors: Dict[int, enum.IntEnum] = {}
    connect_pending_codes: FrozenSet[int] = frozenset()
    already_connected_codes: FrozenSet[int] = frozenset()

    def initialize(self) -> None:
        """One-time process setup; invoked through netwire.runtime."""

    def shutdown(self) -> None:
        """Process-exit cleanup paired with initialize()."""

    @abstractmethod
    def poll(self, sock: socket.socket, event: Event, timeout_ms: float) -> bool:
        """
        Wait until sock is ready for event or timeout_ms elapses.

        Inputs:
          - sock: Socket to wait on.
          - event: Event.READ or Event.WRITE; errors are always watched.
          - timeout_ms: Budget in milliseconds; 0 returns immediately.
        Outputs:
          - bool: True when ready (or in an error state), False on timeout.
        """

    def wait_ready(self, sock: socket.socket, event: Event, deadline: Deadline) -> None:
        """Brief: Block until ready within deadline, else raise TIMEDOUT.

        Inputs:
          - sock: Socket to wait on.
          - event: Readiness to wait for.
          - deadline: Deadline; blocking deadlines return without waiting.

        Outputs:
          - None; raises errors.NetError(TIMEDOUT) when the budget runs out.
        """

        if deadline.blocking:
            return
        if not self.poll(sock, event, deadline.remaining_ms()):
            raise errors.NetError(errors.TIMEDOUT)

    def create(
        self, family: int = socket.AF_INET, type: int = socket.SOCK_STREAM
    ) -> socket.socket:
        try:
            return socket.socket(family, type)
        except OSError as e:
            raise errors.from_exception(e) from e

    def set_blocking(self, sock: socket.socket, blocking: bool) -> None:
        try:
            sock.setblocking(blocking)
        except OSError as e:
            raise errors.from_exception(e) from e

    def connect(self, sock: socket.socket, address: Tuple[str, int]) -> None:
        """Blocking connect."""
        try:
            sock.connect(address)
        except OSError as e:
            raise errors.from_exception(e) from e

    def start_connect(self, sock: socket.socket, address: Tuple[str, int]) -> int:
        """Issue connect() on a non-blocking socket and return the raw code."""
        try:
            return sock.connect_ex(address)
        except OSError as e:
            raise errors.from_exception(e) from e

    def pending_error(self, sock: socket.socket) -> int:
        """Read and clear the socket's pending error (SO_ERROR)."""
        try:
            return sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as e:
            raise errors.from_exception(e) from e

    def read_into(self, sock: socket.socket, buffer) -> int:
        try:
            return sock.recv_into(buffer)
        except OSError as e:
            raise errors.from_exception(e) from e

    def read_from(self, sock: socket.socket, buffer) -> Tuple[int, Tuple[str, int]]:
        try:
            nbytes, peer = sock.recvfrom_into(buffer)
        except OSError as e:
            raise errors.from_exception(e) from e
        return nbytes, (peer[0], peer[1])

    def write(self, sock: socket.socket, data) -> int:
        try:
            return sock.send(data)
        except OSError as e:
            raise errors.from_exception(e) from e

    def write_to(self, sock: socket.socket, data, address: Tuple[str, int]) -> int:
        try:
            return sock.sendto(data, address)
        except OSError as e:
            raise errors.from_exception(e) from e

    def accept(self, sock: socket.socket) -> Tuple[socket.socket, Tuple[str, int]]:
        try:
            client, peer = sock.accept()
        except OSError as e:
            raise errors.from_exception(e) from e
        return client, (peer[0], peer[1])

    def close(self, sock: socket.socket) -> None:
        try:
            sock.close()
        except OSError as e:
            raise errors.from_exception(e) from e

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
