"""
Brief: Loopback tests for connect_udp/listen_udp datagram sockets.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from netwire import errors
from netwire.config import SocketSettings
from netwire.udp import connect_udp, listen_udp


@pytest.fixture
def server():
    s = listen_udp(0, host="127.0.0.1")
    try:
        yield s
    finally:
        s.close()


def test_datagram_round_trip(server):
    """
    Brief: A datagram sent with write() arrives with its sender and can be answered.

    Inputs:
      - server: bound UDPSocket

    Outputs:
      - None: Asserts payload and sender address
    """
    server.set_timeout(1000)
    client = connect_udp("127.0.0.1", server.address[1])
    try:
        client.set_timeout(1000)
        assert client.write(b"ping") == 4
        data, address, port = server.read_from(512)
        assert data == b"ping"
        assert address == "127.0.0.1"

        server.write_to(b"pong", address, port)
        assert client.read(512) == b"pong"
    finally:
        client.close()


def test_zero_length_datagram_is_not_eof(server):
    """
    Brief: An empty datagram reads as zero bytes rather than EOF.

    Inputs:
      - server: bound UDPSocket

    Outputs:
      - None: Asserts empty payload
    """
    server.set_timeout(1000)
    client = connect_udp("127.0.0.1", server.address[1])
    try:
        client.write_to(b"", "127.0.0.1", server.address[1])
        data, _, _ = server.read_from(16)
        assert data == b""
    finally:
        client.close()


def test_read_timeout(server):
    """
    Brief: read_from with a positive timeout and no traffic raises TIMEDOUT.

    Inputs:
      - server: bound UDPSocket

    Outputs:
      - None: Asserts TIMEDOUT
    """
    server.set_timeout(50)
    with pytest.raises(errors.NetError) as ei:
        server.read_from(16)
    assert ei.value.error == errors.TIMEDOUT


def test_write_without_default_peer_is_illegal_state(server):
    """
    Brief: A listening socket has no default peer for write().

    Inputs:
      - server: bound UDPSocket

    Outputs:
      - None: Asserts ILLEGAL_STATE and ILLEGAL_ARGUMENT for bad sizes
    """
    assert server.remote_address is None
    with pytest.raises(errors.NetError) as ei:
        server.write(b"x")
    assert ei.value.error == errors.ILLEGAL_STATE
    with pytest.raises(errors.NetError) as ei:
        server.read_from(0)
    assert ei.value.error == errors.ILLEGAL_ARGUMENT


def test_listen_udp_takes_host_and_timeout_from_settings():
    """
    Brief: listen_udp binds settings.bind_host and applies io_timeout_ms.

    Inputs:
      - None

    Outputs:
      - None: Asserts bound address, timeout and TIMEDOUT on an idle read
    """
    s = listen_udp(0, settings=SocketSettings(bind_host="127.0.0.1", io_timeout_ms=50))
    try:
        assert s.address[0] == "127.0.0.1"
        assert s.timeout_ms == 50
        with pytest.raises(errors.NetError) as ei:
            s.read_from(16)
        assert ei.value.error == errors.TIMEDOUT
    finally:
        s.close()


def test_connect_udp_applies_io_timeout(server):
    """
    Brief: connect_udp gives the new socket the settings' io_timeout_ms.

    Inputs:
      - server: bound UDPSocket

    Outputs:
      - None: Asserts the client read times out
    """
    port = server.address[1]
    c = connect_udp("127.0.0.1", port, settings=SocketSettings(io_timeout_ms=50))
    try:
        assert c.timeout_ms == 50
        with pytest.raises(errors.NetError) as ei:
            c.read(16)
        assert ei.value.error == errors.TIMEDOUT
    finally:
        c.close()
