"""
Brief: Tests for netwire.errors classification, messages and exception mapping.

Inputs:
  - None

Outputs:
  - None
"""

import errno
import socket
import ssl

import pytest

from netwire import errors
from netwire.errors import Error, Kind, NetError


def test_zero_classifies_as_nil_for_every_kind():
    """
    Brief: A raw 0 is success regardless of kind.

    Inputs:
      - None

    Outputs:
      - None: Asserts NIL for each kind
    """
    for kind in Kind:
        assert errors.classify(kind, 0) == errors.NIL
    assert errors.NIL.is_nil


def test_posix_codes_map_to_portable_errors():
    """
    Brief: POSIX errno values fold into the portable OS codes.

    Inputs:
      - None

    Outputs:
      - None: Asserts a representative set of mappings
    """
    errors.set_os_error_table(errors.POSIX_OS_ERRORS)
    assert errors.classify(Kind.OS, errno.ECONNREFUSED) == errors.CONNREFUSED
    assert errors.classify(Kind.OS, errno.ETIMEDOUT) == errors.TIMEDOUT
    assert errors.classify(Kind.OS, errno.EINPROGRESS) == errors.INPROGRESS
    assert errors.classify(Kind.OS, errno.EPIPE) == errors.PIPE
    assert errors.classify(Kind.OS, errno.ECONNRESET) == errors.CONNRESET
    # EWOULDBLOCK is EAGAIN on Linux; the first entry wins.
    if errno.EWOULDBLOCK == errno.EAGAIN:
        assert errors.classify(Kind.OS, errno.EWOULDBLOCK) == errors.AGAIN


def test_winsock_codes_map_to_the_same_portable_errors():
    """
    Brief: Winsock codes land on the same portable values as POSIX errno.

    Inputs:
      - None

    Outputs:
      - None: Asserts mapping via the Winsock table, then restores POSIX
    """
    try:
        errors.set_os_error_table(errors.WINSOCK_OS_ERRORS)
        assert errors.classify(Kind.OS, errors.WSAECONNREFUSED) == errors.CONNREFUSED
        assert errors.classify(Kind.OS, errors.WSAEWOULDBLOCK) == errors.WOULDBLOCK
        assert errors.classify(Kind.OS, errors.WSAETIMEDOUT) == errors.TIMEDOUT
        assert errors.classify(Kind.OS, errors.WSAEISCONN) == errors.ISCONN
    finally:
        errors.set_os_error_table(errors.POSIX_OS_ERRORS)


def test_unknown_raw_code_is_unknown():
    """
    Brief: Unmapped and missing codes classify as UNKNOWN.

    Inputs:
      - None

    Outputs:
      - None: Asserts UNKNOWN for an out-of-table code and None
    """
    assert errors.classify(Kind.OS, 987654) == errors.UNKNOWN
    assert errors.classify(Kind.RESOLVER, 987654) == errors.UNKNOWN
    assert errors.classify(Kind.TLS, None) == errors.UNKNOWN
    assert errors.classify(Kind.BASE, 999) == errors.UNKNOWN


def test_resolver_codes_include_winsock_host_errors():
    """
    Brief: Both getaddrinfo codes and WSAHOST_* codes map to resolver errors.

    Inputs:
      - None

    Outputs:
      - None: Asserts HOST_NOT_FOUND/TRY_AGAIN mappings
    """
    assert errors.classify(Kind.RESOLVER, socket.EAI_NONAME) == errors.HOST_NOT_FOUND
    assert errors.classify(Kind.RESOLVER, socket.EAI_AGAIN) == errors.TRY_AGAIN
    assert errors.classify(Kind.RESOLVER, errors.WSAHOST_NOT_FOUND) == errors.HOST_NOT_FOUND
    assert errors.classify(Kind.RESOLVER, errors.WSANO_DATA) == errors.NO_DATA


def test_equality_ignores_reason_and_kinds_do_not_collide():
    """
    Brief: Errors compare by (kind, code); equal numeric codes of different kinds differ.

    Inputs:
      - None

    Outputs:
      - None: Asserts equality and hashing semantics
    """
    assert errors.CERTIFICATE.with_reason("self signed") == errors.CERTIFICATE
    assert Error(Kind.TLS, 1) != Error(Kind.BASE, 1)
    assert len({errors.EOF, errors.EOF.with_reason("x")}) == 1


def test_messages_are_canonical():
    """
    Brief: message() returns fixed text, TLS errors prefer their reason.

    Inputs:
      - None

    Outputs:
      - None: Asserts message text
    """
    assert errors.message(errors.NIL) == "No error"
    assert errors.message(errors.EOF) == "End of file"
    assert errors.message(errors.CONNREFUSED) == "Connection refused"
    assert errors.message(errors.TIMEDOUT) == "Operation timed out"
    assert errors.message(errors.UNKNOWN) == "Unknown error"
    assert errors.message(errors.TLS_FAILURE.with_reason("SSL: BAD")) == "SSL: BAD"
    assert str(errors.CERTIFICATE) == "Certificate verification failed"


def test_net_error_rejects_nil_and_exposes_kind_code():
    """
    Brief: NetError carries a non-nil Error and uses its message.

    Inputs:
      - None

    Outputs:
      - None: Asserts attributes and ValueError for NIL
    """
    with pytest.raises(ValueError):
        NetError(errors.NIL)
    e = NetError(errors.CONNRESET)
    assert e.error == errors.CONNRESET
    assert e.kind is Kind.OS
    assert str(e) == "Connection reset by peer"


def test_os_error_treats_zero_as_unknown():
    """
    Brief: os_error(0) must still describe a failure.

    Inputs:
      - None

    Outputs:
      - None: Asserts UNKNOWN
    """
    assert errors.os_error(0).error == errors.UNKNOWN
    assert errors.os_error(None).error == errors.UNKNOWN


@pytest.mark.parametrize(
    "exc, expected",
    [
        (ConnectionRefusedError(errno.ECONNREFUSED, "refused"), errors.CONNREFUSED),
        (BrokenPipeError(errno.EPIPE, "pipe"), errors.PIPE),
        (socket.timeout("timed out"), errors.TIMEDOUT),
        (socket.gaierror(socket.EAI_NONAME, "no name"), errors.HOST_NOT_FOUND),
        (ssl.SSLZeroReturnError(ssl.SSL_ERROR_ZERO_RETURN, "closed"), errors.EOF),
        (ssl.SSLEOFError(ssl.SSL_ERROR_EOF, "eof"), errors.EOF),
        (ValueError("bad"), errors.ILLEGAL_ARGUMENT),
        (RuntimeError("?"), errors.UNKNOWN),
    ],
)
def test_from_exception_maps_python_exceptions(exc, expected):
    """
    Brief: from_exception folds socket/ssl exceptions into NetError values.

    Inputs:
      - exc: exception instance
      - expected: Error value

    Outputs:
      - None: Asserts mapping
    """
    errors.set_os_error_table(errors.POSIX_OS_ERRORS)
    assert errors.from_exception(exc).error == expected


def test_from_exception_certificate_and_tls_failures():
    """
    Brief: Verification errors become CERTIFICATE; other SSLError stays tls kind.

    Inputs:
      - None

    Outputs:
      - None: Asserts kind/code and reason capture
    """
    cert_err = ssl.SSLCertVerificationError(1, "verify failed")
    cert_err.verify_message = "self-signed certificate"
    mapped = errors.from_exception(cert_err)
    assert mapped.error == errors.CERTIFICATE
    assert mapped.error.reason == "self-signed certificate"

    tls = errors.from_exception(ssl.SSLError(ssl.SSL_ERROR_SSL, "boom"))
    assert tls.kind is Kind.TLS

    passthrough = NetError(errors.EOF)
    assert errors.from_exception(passthrough) is passthrough
