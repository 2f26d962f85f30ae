"""
Stable facade: shared exception types. Do not add exports without updating __all__.
"""

from __future__ import annotations

from .errors import ConfigError, ProviderError, QuoteBoardError, SnapshotWriteError

__all__ = ["ConfigError", "ProviderError", "QuoteBoardError", "SnapshotWriteError"]
