"""
Client and per-message configuration
"""

import os
import socket
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from .constants import (
    Facility,
    Severity,
    Transport,
    parse_facility,
    parse_severity,
)

DateFormatter = Callable[[datetime], str]


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration for a syslog client"""

    # Destination
    target: str = "127.0.0.1"
    port: int = 514
    transport: Union[Transport, int, str] = Transport.UDP

    # Connection settings
    tcp_timeout: float = 10.0  # seconds, TCP/TLS connect only
    udp_bind_address: Optional[str] = None

    # Message defaults
    facility: int = Facility.LOCAL0
    severity: int = Severity.INFORMATIONAL
    rfc3164: bool = True
    app_name: Optional[str] = None
    msgid: Optional[str] = None
    syslog_hostname: str = field(default_factory=socket.gethostname)
    date_formatter: Optional[DateFormatter] = None

    # TLS settings
    tls_ca: Optional[str] = None  # PEM encoded trust anchors
    tls_ca_file: Optional[str] = None
    tls_verify: bool = True
    tls_cert_file: Optional[str] = None
    tls_key_file: Optional[str] = None

    def __post_init__(self):
        """Normalize the transport kind and validate numeric settings"""
        object.__setattr__(self, "transport", Transport.coerce(self.transport))
        object.__setattr__(self, "port", int(self.port))
        if not 0 <= self.port <= 65535:
            raise ValueError("port must be between 0 and 65535")
        if self.tcp_timeout <= 0:
            raise ValueError("tcp_timeout must be positive")

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(key, default).lower() == "true"

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Create configuration from SYSLOG_CLIENT_* environment variables"""
        values: Dict[str, Any] = {
            "target": os.getenv("SYSLOG_CLIENT_TARGET", "127.0.0.1"),
            "port": int(os.getenv("SYSLOG_CLIENT_PORT", "514")),
            "transport": os.getenv("SYSLOG_CLIENT_TRANSPORT", "udp"),
            "tcp_timeout": float(os.getenv("SYSLOG_CLIENT_TIMEOUT", "10")),
            "udp_bind_address": os.getenv("SYSLOG_CLIENT_BIND_ADDRESS"),
            "facility": parse_facility(os.getenv("SYSLOG_CLIENT_FACILITY", "16")),
            "severity": parse_severity(os.getenv("SYSLOG_CLIENT_SEVERITY", "6")),
            "rfc3164": os.getenv("SYSLOG_CLIENT_RFC", "3164") != "5424",
            "app_name": os.getenv("SYSLOG_CLIENT_APP_NAME"),
            "msgid": os.getenv("SYSLOG_CLIENT_MSGID"),
            "tls_ca_file": os.getenv("SYSLOG_CLIENT_TLS_CA_FILE"),
            "tls_verify": cls._parse_bool_env("SYSLOG_CLIENT_TLS_VERIFY", "true"),
        }
        hostname = os.getenv("SYSLOG_CLIENT_HOSTNAME")
        if hostname:
            values["syslog_hostname"] = hostname
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class MessageOptions:
    """Per-call overrides; ``None`` keeps the client default"""

    facility: Optional[int] = None
    severity: Optional[int] = None
    rfc3164: Optional[bool] = None
    app_name: Optional[str] = None
    msgid: Optional[str] = None
    syslog_hostname: Optional[str] = None
    timestamp: Optional[datetime] = None

    def merged_with(self, config: ClientConfig) -> Dict[str, Any]:
        """Resolve every field against the client defaults"""
        resolved = {}
        for option in fields(self):
            value = getattr(self, option.name)
            if value is None:
                value = getattr(config, option.name, None)
            resolved[option.name] = value
        return resolved


_default_config: Optional[ClientConfig] = None


def get_default_config() -> ClientConfig:
    """Get the default configuration instance"""
    global _default_config
    if _default_config is None:
        _default_config = ClientConfig.from_env()
    return _default_config


def set_default_config(config: Optional[ClientConfig]) -> None:
    """Set the default configuration instance"""
    global _default_config
    _default_config = config
