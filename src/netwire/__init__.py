"""netwire: deadline-bounded TCP, UDP and TLS sockets with portable errors."""

from .deadline import Deadline
from .errors import Error, Kind, NetError
from .resolver import lookup_address
from .runtime import ensure_initialized
from .tcp import TCPListener, TCPSocket, connect_tcp, listen_tcp
from .tls import TLSListener, TLSSocket, connect_tls, listen_tls
from .udp import UDPSocket, connect_udp, listen_udp

__version__ = "0.1.0"

__all__ = [
    "Deadline",
    "Error",
    "Kind",
    "NetError",
    "TCPListener",
    "TCPSocket",
    "TLSListener",
    "TLSSocket",
    "UDPSocket",
    "connect_tcp",
    "connect_tls",
    "connect_udp",
    "ensure_initialized",
    "listen_tcp",
    "listen_tls",
    "listen_udp",
    "lookup_address",
]
