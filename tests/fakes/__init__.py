"""Fake providers for resolver and refresh tests (no live network)."""

from .providers import (
    FakeQuoteProvider,
    FakeQuoteProviderAlwaysFail,
    FakeQuoteProviderFailNThenSucceed,
)

__all__ = [
    "FakeQuoteProvider",
    "FakeQuoteProviderAlwaysFail",
    "FakeQuoteProviderFailNThenSucceed",
]
