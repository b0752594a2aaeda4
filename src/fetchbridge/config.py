"""Fetch configuration from environment variables."""

import os
from dataclasses import dataclass

from fetchbridge.errors import ConfigurationError


@dataclass
class FetchConfig:
    """HTTP fetch behavior configuration.

    Load from environment using FetchConfig.from_env().
    Timeouts are in seconds, intervals in milliseconds.
    """

    # Redirects
    max_redirects: int = 10

    # Timeouts
    connect_timeout: float = 15.0
    read_timeout: float = 60.0

    # Request
    user_agent: str = "Clash.Meta"

    # Streaming
    chunk_size: int = 8192
    progress_interval_ms: int = 500

    def __post_init__(self) -> None:
        if self.max_redirects < 0:
            raise ConfigurationError(
                f"max_redirects must be >= 0, got {self.max_redirects}"
            )
        for name in ("connect_timeout", "read_timeout", "chunk_size"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
        if self.progress_interval_ms < 0:
            raise ConfigurationError(
                f"progress_interval_ms must be >= 0, got {self.progress_interval_ms}"
            )

    @classmethod
    def from_env(cls) -> "FetchConfig":
        """Load configuration from environment variables.

        Optional environment variables (with defaults):
            FETCH_MAX_REDIRECTS: 10 (default)
            FETCH_CONNECT_TIMEOUT: 15 (default, seconds)
            FETCH_READ_TIMEOUT: 60 (default, seconds)
            FETCH_USER_AGENT: Clash.Meta (default)
            FETCH_CHUNK_SIZE: 8192 (default, bytes)
            FETCH_PROGRESS_INTERVAL_MS: 500 (default)

        Raises:
            ConfigurationError: If a value is not a number or out of range
        """
        return cls(
            max_redirects=_env_int("FETCH_MAX_REDIRECTS", 10),
            connect_timeout=_env_float("FETCH_CONNECT_TIMEOUT", 15.0),
            read_timeout=_env_float("FETCH_READ_TIMEOUT", 60.0),
            user_agent=os.getenv("FETCH_USER_AGENT", "Clash.Meta"),
            chunk_size=_env_int("FETCH_CHUNK_SIZE", 8192),
            progress_interval_ms=_env_int("FETCH_PROGRESS_INTERVAL_MS", 500),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", cause=e)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", cause=e)
