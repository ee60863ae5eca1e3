"""Process-wide, once-only initialization of the socket backend.

Brief:
  Every public entry point that creates a socket calls ensure_initialized()
  first. The first call per backend class runs its initialize() hook, selects
  its OS error table for errors.classify(), and registers its shutdown() hook
  with atexit. Later calls return immediately.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Optional, Set

from . import errors
from .backends import SocketBackend, default_backend

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_initialized: Set[type] = set()


def ensure_initialized(backend: Optional[SocketBackend] = None) -> SocketBackend:
    """
    Run one-time setup for backend (default: the platform backend).

    Inputs:
      - backend: Optional explicit backend.
    Outputs:
      - SocketBackend: The backend that was initialized.

    Example:
      >>> b = ensure_initialized()
    """
    backend = backend or default_backend()
    cls = type(backend)
    if cls in _initialized:
        return backend
    with _lock:
        if cls in _initialized:
            return backend
        backend.initialize()
        if backend is default_backend():
            errors.set_os_error_table(backend.os_errors)
        atexit.register(backend.shutdown)
        _initialized.add(cls)
        logger.debug("initialized %s socket backend", backend.name)
    return backend


def is_initialized(backend: Optional[SocketBackend] = None) -> bool:
    return type(backend or default_backend()) in _initialized
