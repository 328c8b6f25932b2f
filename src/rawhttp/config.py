"""
=============================================================================
CLIENT CONFIGURATION
=============================================================================

Centralized configuration for an HTTPClient.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   Priority (highest to lowest):                                     │
    │                                                                     │
    │   1. Command-line arguments                                         │
    │      └── python -m rawhttp --port 8080 GET example.com              │
    │                                                                     │
    │   2. Environment variables                                          │
    │      └── RAWHTTP_RESPONSE_TIMEOUT=5 python -m rawhttp ...           │
    │                                                                     │
    │   3. Default values (in this dataclass)                             │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .core.transport import HTTP_PORT, HTTPS_PORT


DEFAULT_USER_AGENT = "Mozilla/5.0 (rawhttp 1.0)"


def default_port(secure: bool) -> int:
    """443 for TLS, 80 for plaintext."""
    return HTTPS_PORT if secure else HTTP_PORT


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """
    Configuration for an HTTPClient.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    DESTINATION
    - host, port, secure

    IDENTITY
    - user_agent

    TIMEOUTS (seconds)
    - connection_timeout, response_timeout

    FRAMING
    - chunk_size

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # DESTINATION
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """Destination host name or IP address. Also sent as the Host header."""

    port: Optional[int] = None
    """
    Destination port.
    None = the scheme default (80 for plaintext, 443 for TLS).
    """

    secure: bool = False
    """Wrap the connection in TLS."""

    # ─────────────────────────────────────────────────────────────────────
    # IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    user_agent: str = DEFAULT_USER_AGENT
    """Sent as the User-Agent header on every request."""

    # ─────────────────────────────────────────────────────────────────────
    # TIMEOUTS
    # ─────────────────────────────────────────────────────────────────────

    connection_timeout: float = 30.0
    """Maximum time for establishing the connection (TCP + TLS)."""

    response_timeout: float = 60.0
    """
    Maximum time any single read or write may block.
    Slow servers that trickle bytes can take longer overall.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FRAMING
    # ─────────────────────────────────────────────────────────────────────

    chunk_size: int = 1024
    """Largest single read when collecting a response body."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "WARNING"
    """Logging level (DEBUG, INFO, WARNING, ERROR). Only used by the CLI."""

    @property
    def effective_port(self) -> int:
        return self.port if self.port is not None else default_port(self.secure)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        RAWHTTP_HOST              Destination host (default: 127.0.0.1)
        RAWHTTP_PORT              Destination port (default: 80 or 443)
        RAWHTTP_SECURE            Use TLS: 1/true/yes/on (default: off)
        RAWHTTP_USER_AGENT        User-Agent header value
        RAWHTTP_CONNECT_TIMEOUT   Connection timeout in seconds (default: 30)
        RAWHTTP_RESPONSE_TIMEOUT  Response timeout in seconds (default: 60)
        RAWHTTP_LOG_LEVEL         Logging level (default: WARNING)

        =====================================================================
        """
        port = os.getenv("RAWHTTP_PORT")
        return cls(
            host=os.getenv("RAWHTTP_HOST", "127.0.0.1"),
            port=int(port) if port else None,
            secure=_env_bool("RAWHTTP_SECURE"),
            user_agent=os.getenv("RAWHTTP_USER_AGENT", DEFAULT_USER_AGENT),
            connection_timeout=float(os.getenv("RAWHTTP_CONNECT_TIMEOUT", "30")),
            response_timeout=float(os.getenv("RAWHTTP_RESPONSE_TIMEOUT", "60")),
            log_level=os.getenv("RAWHTTP_LOG_LEVEL", "WARNING"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not self.host:
            raise ValueError("host must not be empty")

        if not 0 < self.effective_port < 65536:
            raise ValueError(f"Invalid port: {self.effective_port}. Must be 1-65535.")

        if self.connection_timeout <= 0:
            raise ValueError("connection_timeout must be > 0")

        if self.response_timeout <= 0:
            raise ValueError("response_timeout must be > 0")

        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
