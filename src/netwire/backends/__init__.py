"""Platform socket backends.

The backend is chosen once per process from the host platform; callers may
pass an explicit backend to any entry point (tests use this to drive the
Winsock select() path on POSIX hosts).
"""

import os
from typing import Optional

from .base import Event, SocketBackend
from .posix import PosixBackend
from .winsock import WinsockBackend

__all__ = [
    "Event",
    "PosixBackend",
    "SocketBackend",
    "WinsockBackend",
    "default_backend",
]

_DEFAULT: Optional[SocketBackend] = None


def default_backend() -> SocketBackend:
    """
    Return the process-wide backend for this platform.

    Inputs:
      - None
    Outputs:
      - WinsockBackend on Windows, PosixBackend elsewhere.
    """
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = WinsockBackend() if os.name == "nt" else PosixBackend()
    return _DEFAULT
