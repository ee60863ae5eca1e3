"""Typed configuration models for netwire.

Brief:
  pydantic models describing socket defaults, TLS options and logging. They
  can be built directly in code or loaded from YAML via
  netwire.config.config_parser.parse_config_file().
"""

from __future__ import annotations

import socket
import ssl
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, validator


class SocketSettings(BaseModel):
    """Brief: Default socket parameters for applications built on netwire.

    Inputs:
      - connect_timeout_ms: Connect budget (<= 0 blocks).
      - io_timeout_ms: Per read/write timeout (<= 0 blocks).
      - accept_timeout_ms: Per accept timeout (<= 0 blocks).
      - bind_host: Local address for listeners ("" = every interface).
      - backlog: listen() backlog.
      - reuse_address: Whether listeners set SO_REUSEADDR.

    Outputs:
      - SocketSettings instance.
    """

    connect_timeout_ms: int = Field(default=1000)
    io_timeout_ms: int = Field(default=0)
    accept_timeout_ms: int = Field(default=0)
    bind_host: str = Field(default="")
    backlog: int = Field(default=socket.SOMAXCONN, ge=1)
    reuse_address: bool = Field(default=True)

    class Config:
        extra = "forbid"


class TLSConfig(BaseModel):
    """Brief: TLS options for connect_tls() and listen_tls().

    Inputs:
      - ca_file: Trust roots for clients; platform defaults when omitted.
      - cert_file: PEM certificate (server side).
      - key_file: PEM private key matching cert_file (server side).
      - insecure_skip_verify: Disable peer certificate verification (client).
      - check_hostname: Match the peer certificate against the host name.
      - server_hostname: SNI/verification name; defaults to the connect host.
      - min_version: Minimum protocol version name from ssl.TLSVersion.

    Outputs:
      - TLSConfig instance.

    Example:
      >>> TLSConfig(ca_file="ca.pem").tls_min_version()
      <TLSVersion.TLSv1_2: 771>
    """

    ca_file: Optional[str] = None
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    insecure_skip_verify: bool = False
    check_hostname: bool = True
    server_hostname: Optional[str] = None
    min_version: str = Field(default="TLSv1_2")

    class Config:
        extra = "forbid"

    @validator("min_version", pre=True)
    def _validate_min_version(cls, v: Any) -> str:
        name = str(v).strip()
        if name not in ssl.TLSVersion.__members__:
            raise ValueError(
                "min_version must be one of: "
                + ", ".join(sorted(ssl.TLSVersion.__members__))
            )
        return name

    def tls_min_version(self) -> ssl.TLSVersion:
        return ssl.TLSVersion[self.min_version]


class NetConfig(BaseModel):
    """Brief: Root configuration document.

    Inputs:
      - socket: SocketSettings mapping.
      - tls: Optional TLSConfig mapping.
      - logging: Mapping passed to netwire.config.logging_config.init_logging.

    Outputs:
      - NetConfig instance.
    """

    socket: SocketSettings = Field(default_factory=SocketSettings)
    tls: Optional[TLSConfig] = None
    logging: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "forbid"
