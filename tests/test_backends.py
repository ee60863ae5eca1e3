"""
Brief: Tests for the POSIX poll() and Winsock select() readiness backends.

Inputs:
  - None

Outputs:
  - None
"""

import os
import signal
import socket

import pytest

from netwire import errors
from netwire.backends import (
    Event,
    PosixBackend,
    WinsockBackend,
    default_backend,
)
from netwire.deadline import Deadline

posix_only = pytest.mark.skipif(os.name == "nt", reason="poll() backend is POSIX only")


def _backends():
    out = [WinsockBackend()]
    if os.name != "nt":
        out.append(PosixBackend())
    return out


@pytest.fixture
def sock_pair():
    a, b = socket.socketpair()
    try:
        yield a, b
    finally:
        a.close()
        b.close()


def test_default_backend_matches_platform_and_is_shared():
    """
    Brief: default_backend() picks the platform backend once.

    Inputs:
      - None

    Outputs:
      - None: Asserts type and identity
    """
    b = default_backend()
    assert b is default_backend()
    expected = WinsockBackend if os.name == "nt" else PosixBackend
    assert isinstance(b, expected)


@pytest.mark.parametrize("backend", _backends(), ids=lambda b: b.name)
def test_poll_reports_read_readiness(backend, sock_pair):
    """
    Brief: poll(READ) times out on an idle socket and succeeds once data arrives.

    Inputs:
      - backend: SocketBackend under test

    Outputs:
      - None: Asserts False then True
    """
    a, b = sock_pair
    assert backend.poll(a, Event.READ, 20) is False
    b.sendall(b"x")
    assert backend.poll(a, Event.READ, 1000) is True


@pytest.mark.parametrize("backend", _backends(), ids=lambda b: b.name)
def test_poll_reports_write_readiness(backend, sock_pair):
    """
    Brief: A fresh connected socket is immediately writable.

    Inputs:
      - backend: SocketBackend under test

    Outputs:
      - None: Asserts True
    """
    a, _ = sock_pair
    assert backend.poll(a, Event.WRITE, 0) is True


@pytest.mark.parametrize("backend", _backends(), ids=lambda b: b.name)
def test_wait_ready_raises_timedout_when_budget_expires(backend, sock_pair):
    """
    Brief: wait_ready converts a poll timeout into NetError(TIMEDOUT).

    Inputs:
      - backend: SocketBackend under test

    Outputs:
      - None: Asserts TIMEDOUT
    """
    a, _ = sock_pair
    with pytest.raises(errors.NetError) as ei:
        backend.wait_ready(a, Event.READ, Deadline(30))
    assert ei.value.error == errors.TIMEDOUT


def test_wait_ready_with_blocking_deadline_does_not_poll(sock_pair):
    """
    Brief: Blocking deadlines leave the wait to the blocking call itself.

    Inputs:
      - None

    Outputs:
      - None: Asserts poll() is never consulted
    """

    class _NoPoll(PosixBackend):
        def poll(self, sock, event, timeout_ms):  # pragma: no cover - must not run
            raise AssertionError("poll called")

    a, _ = sock_pair
    _NoPoll().wait_ready(a, Event.READ, Deadline(0))


def test_backend_calls_wrap_os_errors():
    """
    Brief: Socket operations on a closed descriptor surface as NetError.

    Inputs:
      - None

    Outputs:
      - None: Asserts NetError with kind OS
    """
    backend = default_backend()
    s = socket.socket()
    s.close()
    with pytest.raises(errors.NetError) as ei:
        backend.pending_error(s)
    assert ei.value.kind is errors.Kind.OS


@posix_only
def test_posix_initialize_ignores_sigpipe():
    """
    Brief: PosixBackend.initialize sets SIGPIPE to SIG_IGN from the main thread.

    Inputs:
      - None

    Outputs:
      - None: Asserts SIGPIPE disposition, restoring the previous handler
    """
    previous = signal.getsignal(signal.SIGPIPE)
    try:
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
        PosixBackend().initialize()
        assert signal.getsignal(signal.SIGPIPE) == signal.SIG_IGN
    finally:
        signal.signal(signal.SIGPIPE, previous)
