"""
Brief: Global pytest configuration: src/ import path, per-test timeout and
loopback helpers shared by the socket tests.

Inputs:
  - None

Outputs:
  - None
"""

import os
import signal
import socket
import subprocess
import sys

import pytest

# Ensure 'src' is on sys.path so the 'netwire' package is importable in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def _alarm_handler(signum, frame):
    """
    Brief: Signal handler that raises TimeoutError when alarm triggers.

    Inputs:
      - signum: signal number (int)
      - frame: current frame (ignored)

    Outputs:
      - None: Raises TimeoutError to fail the test
    """
    raise TimeoutError("Test exceeded 10 seconds")


# Install handler if supported on this platform
if hasattr(signal, "SIGALRM"):
    signal.signal(signal.SIGALRM, _alarm_handler)


@pytest.fixture(autouse=True)
def enforce_test_timeout():
    """
    Brief: Enforce a hard 10-second timeout for each test.

    Inputs:
      - None

    Outputs:
      - None: Cancels alarm after test
    """
    if hasattr(signal, "SIGALRM"):
        signal.alarm(10)
        try:
            yield
        finally:
            signal.alarm(0)
    else:
        yield


@pytest.fixture
def closed_port():
    """
    Brief: A loopback port with nothing listening on it.

    Inputs:
      - None

    Outputs:
      - int: Port number that was bound and released.
    """
    s = socket.socket()
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


def _openssl(*args):
    subprocess.check_call(
        ["openssl", *args],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


@pytest.fixture(scope="session")
def selfsigned_cert(tmp_path_factory):
    """
    Brief: Self-signed localhost certificate plus an unrelated key.

    Inputs:
      - tmp_path_factory: pytest factory for a session temp dir

    Outputs:
      - (cert_file, key_file, other_key_file) as strings; skips when the
        openssl CLI is unavailable.
    """
    tmp = tmp_path_factory.mktemp("tlscert")
    cert_file = tmp / "cert.pem"
    key_file = tmp / "key.pem"
    other_key = tmp / "other.pem"
    try:
        _openssl(
            "req",
            "-x509",
            "-nodes",
            "-newkey",
            "rsa:2048",
            "-keyout",
            str(key_file),
            "-out",
            str(cert_file),
            "-subj",
            "/CN=localhost",
            "-addext",
            "subjectAltName=DNS:localhost,IP:127.0.0.1",
            "-days",
            "1",
        )
        _openssl(
            "req",
            "-x509",
            "-nodes",
            "-newkey",
            "rsa:2048",
            "-keyout",
            str(other_key),
            "-out",
            str(tmp / "other_cert.pem"),
            "-subj",
            "/CN=other",
            "-days",
            "1",
        )
    except Exception:
        pytest.skip("openssl not available for generating self-signed cert")
    return str(cert_file), str(key_file), str(other_key)
