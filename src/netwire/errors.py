"""Portable error taxonomy for netwire.

Brief:
  Platform error numbers (POSIX errno, Winsock codes, getaddrinfo codes and
  TLS library codes) are folded into a small closed set of portable
  ``Error`` values. Every failure raised by the package is a ``NetError``
  carrying exactly one of these values.

Inputs:
  - Raw numeric codes or Python exceptions raised by socket/ssl calls.

Outputs:
  - ``Error`` values, ``NetError`` exceptions and canonical messages.
"""

from __future__ import annotations

import errno
import os
import socket
import ssl
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Iterable, Optional, Tuple


class Kind(str, Enum):
    """Error kind selecting which code table a numeric code belongs to."""

    BASE = "base"
    OS = "os"
    RESOLVER = "resolver"
    TLS = "tls"


class BaseCode(IntEnum):
    NIL = 0
    UNKNOWN = 1
    EOF = 2
    ILLEGAL_ARGUMENT = 3
    ILLEGAL_STATE = 4
    NOT_FOUND = 5


class OSCode(IntEnum):
    PERM = 1
    NOENT = 2
    INTR = 3
    IO = 4
    BADF = 5
    NOMEM = 6
    ACCES = 7
    FAULT = 8
    NOTDIR = 9
    ISDIR = 10
    INVAL = 11
    NFILE = 12
    MFILE = 13
    NOTTY = 14
    FBIG = 15
    NOSPC = 16
    ROFS = 17
    PIPE = 18
    AGAIN = 19
    WOULDBLOCK = 20
    INPROGRESS = 21
    ALREADY = 22
    NOTSOCK = 23
    DESTADDRREQ = 24
    MSGSIZE = 25
    PROTOTYPE = 26
    NOPROTOOPT = 27
    PROTONOSUPPORT = 28
    OPNOTSUPP = 29
    AFNOSUPPORT = 30
    ADDRINUSE = 31
    ADDRNOTAVAIL = 32
    NETDOWN = 33
    NETUNREACH = 34
    NETRESET = 35
    CONNABORTED = 36
    CONNRESET = 37
    NOBUFS = 38
    ISCONN = 39
    NOTCONN = 40
    TIMEDOUT = 41
    CONNREFUSED = 42
    LOOP = 43
    NAMETOOLONG = 44
    HOSTUNREACH = 45
    PROTO = 46


class ResolverCode(IntEnum):
    HOST_NOT_FOUND = 1
    TRY_AGAIN = 2
    NO_RECOVERY = 3
    NO_DATA = 4


class TLSCode(IntEnum):
    SSL = 1
    WANT_READ = 2
    WANT_WRITE = 3
    WANT_X509_LOOKUP = 4
    SYSCALL = 5
    ZERO_RETURN = 6
    WANT_CONNECT = 7
    EOF = 8
    CERTIFICATE = 100


@dataclass(frozen=True)
class Error:
    """
    A portable error value.

    Inputs:
      - kind: Kind selecting the code table.
      - code: Portable code within that kind.
      - reason: Optional library-provided text; ignored by equality.
    Outputs:
      - Hashable value; two errors are equal when kind and code match.
    """

    kind: Kind
    code: int
    reason: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def is_nil(self) -> bool:
        return self.kind is Kind.BASE and self.code == BaseCode.NIL

    def with_reason(self, reason: Optional[str]) -> "Error":
        return Error(self.kind, self.code, reason)

    def __str__(self) -> str:
        return message(self)


# base
NIL = Error(Kind.BASE, BaseCode.NIL)
UNKNOWN = Error(Kind.BASE, BaseCode.UNKNOWN)
EOF = Error(Kind.BASE, BaseCode.EOF)
ILLEGAL_ARGUMENT = Error(Kind.BASE, BaseCode.ILLEGAL_ARGUMENT)
ILLEGAL_STATE = Error(Kind.BASE, BaseCode.ILLEGAL_STATE)
NOT_FOUND = Error(Kind.BASE, BaseCode.NOT_FOUND)

# os
PERM = Error(Kind.OS, OSCode.PERM)
NOENT = Error(Kind.OS, OSCode.NOENT)
INTR = Error(Kind.OS, OSCode.INTR)
IO = Error(Kind.OS, OSCode.IO)
BADF = Error(Kind.OS, OSCode.BADF)
NOMEM = Error(Kind.OS, OSCode.NOMEM)
ACCES = Error(Kind.OS, OSCode.ACCES)
INVAL = Error(Kind.OS, OSCode.INVAL)
MFILE = Error(Kind.OS, OSCode.MFILE)
PIPE = Error(Kind.OS, OSCode.PIPE)
AGAIN = Error(Kind.OS, OSCode.AGAIN)
WOULDBLOCK = Error(Kind.OS, OSCode.WOULDBLOCK)
INPROGRESS = Error(Kind.OS, OSCode.INPROGRESS)
ALREADY = Error(Kind.OS, OSCode.ALREADY)
NOTSOCK = Error(Kind.OS, OSCode.NOTSOCK)
ADDRINUSE = Error(Kind.OS, OSCode.ADDRINUSE)
ADDRNOTAVAIL = Error(Kind.OS, OSCode.ADDRNOTAVAIL)
NETUNREACH = Error(Kind.OS, OSCode.NETUNREACH)
CONNABORTED = Error(Kind.OS, OSCode.CONNABORTED)
CONNRESET = Error(Kind.OS, OSCode.CONNRESET)
ISCONN = Error(Kind.OS, OSCode.ISCONN)
NOTCONN = Error(Kind.OS, OSCode.NOTCONN)
TIMEDOUT = Error(Kind.OS, OSCode.TIMEDOUT)
CONNREFUSED = Error(Kind.OS, OSCode.CONNREFUSED)
HOSTUNREACH = Error(Kind.OS, OSCode.HOSTUNREACH)

# resolver
HOST_NOT_FOUND = Error(Kind.RESOLVER, ResolverCode.HOST_NOT_FOUND)
TRY_AGAIN = Error(Kind.RESOLVER, ResolverCode.TRY_AGAIN)
NO_RECOVERY = Error(Kind.RESOLVER, ResolverCode.NO_RECOVERY)
NO_DATA = Error(Kind.RESOLVER, ResolverCode.NO_DATA)

# tls
TLS_FAILURE = Error(Kind.TLS, TLSCode.SSL)
CERTIFICATE = Error(Kind.TLS, TLSCode.CERTIFICATE)


_MESSAGES: Dict[Tuple[Kind, int], str] = {
    (Kind.BASE, BaseCode.NIL): "No error",
    (Kind.BASE, BaseCode.UNKNOWN): "Unknown error",
    (Kind.BASE, BaseCode.EOF): "End of file",
    (Kind.BASE, BaseCode.ILLEGAL_ARGUMENT): "Illegal argument",
    (Kind.BASE, BaseCode.ILLEGAL_STATE): "Illegal state",
    (Kind.BASE, BaseCode.NOT_FOUND): "Not found",
    (Kind.OS, OSCode.PERM): "Operation not permitted",
    (Kind.OS, OSCode.NOENT): "No such file or directory",
    (Kind.OS, OSCode.INTR): "Interrupted system call",
    (Kind.OS, OSCode.IO): "Input/output error",
    (Kind.OS, OSCode.BADF): "Bad file descriptor",
    (Kind.OS, OSCode.NOMEM): "Cannot allocate memory",
    (Kind.OS, OSCode.ACCES): "Permission denied",
    (Kind.OS, OSCode.FAULT): "Bad address",
    (Kind.OS, OSCode.NOTDIR): "Not a directory",
    (Kind.OS, OSCode.ISDIR): "Is a directory",
    (Kind.OS, OSCode.INVAL): "Invalid argument",
    (Kind.OS, OSCode.NFILE): "Too many open files in system",
    (Kind.OS, OSCode.MFILE): "Too many open files",
    (Kind.OS, OSCode.NOTTY): "Inappropriate ioctl for device",
    (Kind.OS, OSCode.FBIG): "File too large",
    (Kind.OS, OSCode.NOSPC): "No space left on device",
    (Kind.OS, OSCode.ROFS): "Read-only file system",
    (Kind.OS, OSCode.PIPE): "Broken pipe",
    (Kind.OS, OSCode.AGAIN): "Resource temporarily unavailable",
    (Kind.OS, OSCode.WOULDBLOCK): "Operation would block",
    (Kind.OS, OSCode.INPROGRESS): "Operation now in progress",
    (Kind.OS, OSCode.ALREADY): "Operation already in progress",
    (Kind.OS, OSCode.NOTSOCK): "Socket operation on non-socket",
    (Kind.OS, OSCode.DESTADDRREQ): "Destination address required",
    (Kind.OS, OSCode.MSGSIZE): "Message too long",
    (Kind.OS, OSCode.PROTOTYPE): "Protocol wrong type for socket",
    (Kind.OS, OSCode.NOPROTOOPT): "Protocol not available",
    (Kind.OS, OSCode.PROTONOSUPPORT): "Protocol not supported",
    (Kind.OS, OSCode.OPNOTSUPP): "Operation not supported",
    (Kind.OS, OSCode.AFNOSUPPORT): "Address family not supported by protocol family",
    (Kind.OS, OSCode.ADDRINUSE): "Address already in use",
    (Kind.OS, OSCode.ADDRNOTAVAIL): "Can't assign requested address",
    (Kind.OS, OSCode.NETDOWN): "Network is down",
    (Kind.OS, OSCode.NETUNREACH): "Network is unreachable",
    (Kind.OS, OSCode.NETRESET): "Network dropped connection on reset",
    (Kind.OS, OSCode.CONNABORTED): "Software caused connection abort",
    (Kind.OS, OSCode.CONNRESET): "Connection reset by peer",
    (Kind.OS, OSCode.NOBUFS): "No buffer space available",
    (Kind.OS, OSCode.ISCONN): "Socket is already connected",
    (Kind.OS, OSCode.NOTCONN): "Socket is not connected",
    (Kind.OS, OSCode.TIMEDOUT): "Operation timed out",
    (Kind.OS, OSCode.CONNREFUSED): "Connection refused",
    (Kind.OS, OSCode.LOOP): "Too many levels of symbolic links",
    (Kind.OS, OSCode.NAMETOOLONG): "File name too long",
    (Kind.OS, OSCode.HOSTUNREACH): "No route to host",
    (Kind.OS, OSCode.PROTO): "Protocol error",
    (Kind.RESOLVER, ResolverCode.HOST_NOT_FOUND): "No such host is known",
    (Kind.RESOLVER, ResolverCode.TRY_AGAIN): (
        "A temporary error occurred on an authoritative name server"
    ),
    (Kind.RESOLVER, ResolverCode.NO_RECOVERY): (
        "A nonrecoverable name server error occurred"
    ),
    (Kind.RESOLVER, ResolverCode.NO_DATA): (
        "The requested name is valid but does not have an IP address"
    ),
    (Kind.TLS, TLSCode.SSL): "TLS protocol error",
    (Kind.TLS, TLSCode.WANT_READ): "TLS operation needs more input",
    (Kind.TLS, TLSCode.WANT_WRITE): "TLS operation needs to write output",
    (Kind.TLS, TLSCode.WANT_X509_LOOKUP): "TLS certificate lookup pending",
    (Kind.TLS, TLSCode.SYSCALL): "TLS system call failed",
    (Kind.TLS, TLSCode.ZERO_RETURN): "TLS connection closed by peer",
    (Kind.TLS, TLSCode.WANT_CONNECT): "TLS connect pending",
    (Kind.TLS, TLSCode.EOF): "TLS connection closed in violation of the protocol",
    (Kind.TLS, TLSCode.CERTIFICATE): "Certificate verification failed",
}

_GENERIC_MESSAGES = {
    Kind.BASE: "Unknown error",
    Kind.OS: "Operating system error",
    Kind.RESOLVER: "Name resolution error",
    Kind.TLS: "TLS error",
}


def _build_table(pairs: Iterable[Tuple[Optional[int], IntEnum]]) -> Dict[int, IntEnum]:
    """Brief: Build a raw-code lookup table, keeping the first entry for aliases.

    Inputs:
      - pairs: (raw_code, portable_code) tuples; raw_code None is skipped.

    Outputs:
      - dict mapping raw numeric code to portable code.
    """

    table: Dict[int, IntEnum] = {}
    for raw, code in pairs:
        if raw is None:
            continue
        table.setdefault(int(raw), code)
    return table


def _errno(name: str) -> Optional[int]:
    return getattr(errno, name, None)


POSIX_OS_ERRORS: Dict[int, IntEnum] = _build_table(
    [
        (_errno("EPERM"), OSCode.PERM),
        (_errno("ENOENT"), OSCode.NOENT),
        (_errno("EINTR"), OSCode.INTR),
        (_errno("EIO"), OSCode.IO),
        (_errno("EBADF"), OSCode.BADF),
        (_errno("ENOMEM"), OSCode.NOMEM),
        (_errno("EACCES"), OSCode.ACCES),
        (_errno("EFAULT"), OSCode.FAULT),
        (_errno("ENOTDIR"), OSCode.NOTDIR),
        (_errno("EISDIR"), OSCode.ISDIR),
        (_errno("EINVAL"), OSCode.INVAL),
        (_errno("ENFILE"), OSCode.NFILE),
        (_errno("EMFILE"), OSCode.MFILE),
        (_errno("ENOTTY"), OSCode.NOTTY),
        (_errno("EFBIG"), OSCode.FBIG),
        (_errno("ENOSPC"), OSCode.NOSPC),
        (_errno("EROFS"), OSCode.ROFS),
        (_errno("EPIPE"), OSCode.PIPE),
        (_errno("EAGAIN"), OSCode.AGAIN),
        (_errno("EWOULDBLOCK"), OSCode.WOULDBLOCK),
        (_errno("EINPROGRESS"), OSCode.INPROGRESS),
        (_errno("EALREADY"), OSCode.ALREADY),
        (_errno("ENOTSOCK"), OSCode.NOTSOCK),
        (_errno("EDESTADDRREQ"), OSCode.DESTADDRREQ),
        (_errno("EMSGSIZE"), OSCode.MSGSIZE),
        (_errno("EPROTOTYPE"), OSCode.PROTOTYPE),
        (_errno("ENOPROTOOPT"), OSCode.NOPROTOOPT),
        (_errno("EPROTONOSUPPORT"), OSCode.PROTONOSUPPORT),
        (_errno("EOPNOTSUPP"), OSCode.OPNOTSUPP),
        (_errno("EAFNOSUPPORT"), OSCode.AFNOSUPPORT),
        (_errno("EADDRINUSE"), OSCode.ADDRINUSE),
        (_errno("EADDRNOTAVAIL"), OSCode.ADDRNOTAVAIL),
        (_errno("ENETDOWN"), OSCode.NETDOWN),
        (_errno("ENETUNREACH"), OSCode.NETUNREACH),
        (_errno("ENETRESET"), OSCode.NETRESET),
        (_errno("ECONNABORTED"), OSCode.CONNABORTED),
        (_errno("ECONNRESET"), OSCode.CONNRESET),
        (_errno("ENOBUFS"), OSCode.NOBUFS),
        (_errno("EISCONN"), OSCode.ISCONN),
        (_errno("ENOTCONN"), OSCode.NOTCONN),
        (_errno("ETIMEDOUT"), OSCode.TIMEDOUT),
        (_errno("ECONNREFUSED"), OSCode.CONNREFUSED),
        (_errno("ELOOP"), OSCode.LOOP),
        (_errno("ENAMETOOLONG"), OSCode.NAMETOOLONG),
        (_errno("EHOSTUNREACH"), OSCode.HOSTUNREACH),
        (_errno("EPROTO"), OSCode.PROTO),
    ]
)

# Winsock codes are fixed by the Windows ABI, so they are spelled out rather
# than read from the errno module (which only defines them on Windows).
WSAEINTR = 10004
WSAEBADF = 10009
WSAEACCES = 10013
WSAEFAULT = 10014
WSAEINVAL = 10022
WSAEMFILE = 10024
WSAEWOULDBLOCK = 10035
WSAEINPROGRESS = 10036
WSAEALREADY = 10037
WSAENOTSOCK = 10038
WSAEDESTADDRREQ = 10039
WSAEMSGSIZE = 10040
WSAEPROTOTYPE = 10041
WSAENOPROTOOPT = 10042
WSAEPROTONOSUPPORT = 10043
WSAEOPNOTSUPP = 10045
WSAEAFNOSUPPORT = 10047
WSAEADDRINUSE = 10048
WSAEADDRNOTAVAIL = 10049
WSAENETDOWN = 10050
WSAENETUNREACH = 10051
WSAENETRESET = 10052
WSAECONNABORTED = 10053
WSAECONNRESET = 10054
WSAENOBUFS = 10055
WSAEISCONN = 10056
WSAENOTCONN = 10057
WSAETIMEDOUT = 10060
WSAECONNREFUSED = 10061
WSAELOOP = 10062
WSAENAMETOOLONG = 10063
WSAEHOSTUNREACH = 10065
WSAHOST_NOT_FOUND = 11001
WSATRY_AGAIN = 11002
WSANO_RECOVERY = 11003
WSANO_DATA = 11004

WINSOCK_OS_ERRORS: Dict[int, IntEnum] = _build_table(
    [
        (WSAEINTR, OSCode.INTR),
        (WSAEBADF, OSCode.BADF),
        (WSAEACCES, OSCode.ACCES),
        (WSAEFAULT, OSCode.FAULT),
        (WSAEINVAL, OSCode.INVAL),
        (WSAEMFILE, OSCode.MFILE),
        (WSAEWOULDBLOCK, OSCode.WOULDBLOCK),
        (WSAEINPROGRESS, OSCode.INPROGRESS),
        (WSAEALREADY, OSCode.ALREADY),
        (WSAENOTSOCK, OSCode.NOTSOCK),
        (WSAEDESTADDRREQ, OSCode.DESTADDRREQ),
        (WSAEMSGSIZE, OSCode.MSGSIZE),
        (WSAEPROTOTYPE, OSCode.PROTOTYPE),
        (WSAENOPROTOOPT, OSCode.NOPROTOOPT),
        (WSAEPROTONOSUPPORT, OSCode.PROTONOSUPPORT),
        (WSAEOPNOTSUPP, OSCode.OPNOTSUPP),
        (WSAEAFNOSUPPORT, OSCode.AFNOSUPPORT),
        (WSAEADDRINUSE, OSCode.ADDRINUSE),
        (WSAEADDRNOTAVAIL, OSCode.ADDRNOTAVAIL),
        (WSAENETDOWN, OSCode.NETDOWN),
        (WSAENETUNREACH, OSCode.NETUNREACH),
        (WSAENETRESET, OSCode.NETRESET),
        (WSAECONNABORTED, OSCode.CONNABORTED),
        (WSAECONNRESET, OSCode.CONNRESET),
        (WSAENOBUFS, OSCode.NOBUFS),
        (WSAEISCONN, OSCode.ISCONN),
        (WSAENOTCONN, OSCode.NOTCONN),
        (WSAETIMEDOUT, OSCode.TIMEDOUT),
        (WSAECONNREFUSED, OSCode.CONNREFUSED),
        (WSAELOOP, OSCode.LOOP),
        (WSAENAMETOOLONG, OSCode.NAMETOOLONG),
        (WSAEHOSTUNREACH, OSCode.HOSTUNREACH),
        # Windows file APIs still report C runtime errno values.
        (errno.ENOENT, OSCode.NOENT),
        (errno.EACCES, OSCode.ACCES),
    ]
)

RESOLVER_ERRORS: Dict[int, IntEnum] = _build_table(
    [
        (getattr(socket, "EAI_NONAME", None), ResolverCode.HOST_NOT_FOUND),
        (getattr(socket, "EAI_AGAIN", None), ResolverCode.TRY_AGAIN),
        (getattr(socket, "EAI_FAIL", None), ResolverCode.NO_RECOVERY),
        (getattr(socket, "EAI_NODATA", None), ResolverCode.NO_DATA),
        (WSAHOST_NOT_FOUND, ResolverCode.HOST_NOT_FOUND),
        (WSATRY_AGAIN, ResolverCode.TRY_AGAIN),
        (WSANO_RECOVERY, ResolverCode.NO_RECOVERY),
        (WSANO_DATA, ResolverCode.NO_DATA),
    ]
)

TLS_ERRORS: Dict[int, IntEnum] = _build_table(
    [
        (ssl.SSL_ERROR_SSL, TLSCode.SSL),
        (ssl.SSL_ERROR_WANT_READ, TLSCode.WANT_READ),
        (ssl.SSL_ERROR_WANT_WRITE, TLSCode.WANT_WRITE),
        (ssl.SSL_ERROR_WANT_X509_LOOKUP, TLSCode.WANT_X509_LOOKUP),
        (ssl.SSL_ERROR_SYSCALL, TLSCode.SYSCALL),
        (ssl.SSL_ERROR_ZERO_RETURN, TLSCode.ZERO_RETURN),
        (ssl.SSL_ERROR_WANT_CONNECT, TLSCode.WANT_CONNECT),
        (ssl.SSL_ERROR_EOF, TLSCode.EOF),
    ]
)

_active_os_table: Dict[int, IntEnum] = (
    WINSOCK_OS_ERRORS if os.name == "nt" else POSIX_OS_ERRORS
)


def set_os_error_table(table: Dict[int, IntEnum]) -> None:
    """Select the OS error table used by classify(); called by the backend."""

    global _active_os_table
    _active_os_table = table


def classify(kind: Kind, raw_code: Optional[int]) -> Error:
    """
    Map a raw platform code of the given kind to a portable Error.

    Inputs:
      - kind: Kind whose table should interpret raw_code.
      - raw_code: Raw numeric code; 0 means success.
    Outputs:
      - Error: NIL for 0, the mapped error when known, UNKNOWN otherwise.

    Example:
      >>> classify(Kind.OS, errno.ECONNREFUSED) == CONNREFUSED
      True
    """
    if raw_code == 0:
        return NIL
    if raw_code is None:
        return UNKNOWN
    if kind is Kind.BASE:
        try:
            return Error(Kind.BASE, BaseCode(int(raw_code)))
        except ValueError:
            return UNKNOWN
    if kind is Kind.OS:
        table = _active_os_table
    elif kind is Kind.RESOLVER:
        table = RESOLVER_ERRORS
    else:
        table = TLS_ERRORS
    code = table.get(int(raw_code))
    if code is None:
        return UNKNOWN
    return Error(kind, code)


def message(err: Error) -> str:
    """
    Return the canonical message for an Error.

    Inputs:
      - err: Error value.
    Outputs:
      - str: Message from the table; TLS errors prefer the library reason.
    """
    if err.kind is Kind.TLS and err.reason:
        return err.reason
    text = _MESSAGES.get((err.kind, int(err.code)))
    if text is not None:
        return text
    return _GENERIC_MESSAGES.get(err.kind, "Unknown error")


class NetError(Exception):
    """
    Exception carrying a portable Error value.

    Inputs:
      - error: Error describing the failure (never NIL).
    Outputs:
      - Exception instance; str() is the canonical message.
    """

    def __init__(self, error: Error):
        if error.is_nil:
            raise ValueError("NetError requires a non-nil error")
        super().__init__(message(error))
        self.error = error

    @property
    def kind(self) -> Kind:
        return self.error.kind

    @property
    def code(self) -> int:
        return self.error.code

    def __repr__(self) -> str:
        return f"NetError({self.error.kind.value}:{int(self.error.code)} {self})"


def os_error(raw_code: Optional[int]) -> NetError:
    """Build a NetError from a raw OS code (a raw 0 here means UNKNOWN)."""

    err = classify(Kind.OS, raw_code)
    return NetError(UNKNOWN if err.is_nil else err)


def _ssl_reason(exc: ssl.SSLError) -> Optional[str]:
    reason = getattr(exc, "reason", None)
    library = getattr(exc, "library", None)
    if reason and library:
        return f"{library}: {reason}"
    if reason:
        return str(reason)
    text = getattr(exc, "strerror", None)
    return str(text) if text else None


def from_exception(exc: BaseException) -> NetError:
    """
    Convert a Python socket/ssl exception into a NetError.

    Inputs:
      - exc: Exception raised by socket, ssl or getaddrinfo calls.
    Outputs:
      - NetError with the matching kind/code.

    Notes:
      - Certificate verification failures collapse into CERTIFICATE.
      - Clean TLS close (close_notify) and ragged EOF become EOF so secure and
        plain sockets fail with the same shape.
    """
    if isinstance(exc, NetError):
        return exc
    if isinstance(exc, ssl.SSLCertVerificationError):
        return NetError(
            CERTIFICATE.with_reason(getattr(exc, "verify_message", None) or None)
        )
    if isinstance(exc, (ssl.SSLZeroReturnError, ssl.SSLEOFError)):
        return NetError(EOF)
    if isinstance(exc, ssl.SSLError):
        err = classify(Kind.TLS, exc.errno)
        if err.is_nil or err == UNKNOWN:
            err = TLS_FAILURE
        return NetError(err.with_reason(_ssl_reason(exc)))
    if isinstance(exc, socket.gaierror):
        err = classify(Kind.RESOLVER, exc.errno)
        return NetError(HOST_NOT_FOUND if err.is_nil else err)
    if isinstance(exc, (socket.timeout, TimeoutError)) and not getattr(
        exc, "errno", None
    ):
        return NetError(TIMEDOUT)
    if isinstance(exc, OSError):
        code = exc.errno
        winerror = getattr(exc, "winerror", None)
        if winerror:
            code = winerror
        return os_error(code)
    if isinstance(exc, ValueError):
        return NetError(ILLEGAL_ARGUMENT)
    return NetError(UNKNOWN)
