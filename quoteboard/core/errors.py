"""
Shared exception types for quoteboard.
Stable surface; extend only.
"""

from __future__ import annotations

from typing import Any, Optional


class QuoteBoardError(Exception):
    """Base exception for quoteboard; catch this for any package-raised error."""

    pass


class ConfigError(QuoteBoardError):
    """Missing API key or unusable configuration. Fatal before any network work."""

    pass


class ProviderError(QuoteBoardError):
    """A single provider call failed (network, HTTP status, malformed body)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.payload = payload


class SnapshotWriteError(QuoteBoardError):
    """Writing a snapshot file failed."""

    pass


__all__ = ["ConfigError", "ProviderError", "QuoteBoardError", "SnapshotWriteError"]
