"""Hostname to IPv4 address lookup consumed by the connection engine."""

import ipaddress
import logging
import socket

from . import errors
from .runtime import ensure_initialized

logger = logging.getLogger(__name__)


def lookup_address(host: str) -> str:
    """
    Resolve host to a dotted-quad IPv4 address.

    Inputs:
      - host: Hostname or IPv4 literal.
    Outputs:
      - str: IPv4 address.

    Raises:
      - errors.NetError: resolver kind on lookup failure, ILLEGAL_ARGUMENT for
        an empty host.

    Example:
      >>> lookup_address("127.0.0.1")
      '127.0.0.1'
    """
    if not host:
        raise errors.NetError(errors.ILLEGAL_ARGUMENT)
    try:
        return str(ipaddress.IPv4Address(host))
    except ValueError:
        pass

    ensure_initialized()
    try:
        infos = socket.getaddrinfo(host, None, socket.AF_INET, socket.SOCK_STREAM)
    except OSError as e:
        logger.debug("lookup of %s failed: %s", host, e)
        raise errors.from_exception(e) from e
    if not infos:
        raise errors.NetError(errors.NO_DATA)
    return infos[0][4][0]
