"""
Provider architecture for quote resolution.

Providers implement a single capability, try_fetch(instrument) -> price | None.
A config-driven priority list per instrument kind decides the order in which
they are tried; the first usable price wins.
"""

from __future__ import annotations

from .base import (
    Instrument,
    InstrumentKind,
    ProviderHealth,
    QuoteProvider,
    ResolvedQuote,
    parse_price,
)
from .chain import QuoteChain
from .registry import ProviderRegistry

__all__ = [
    "Instrument",
    "InstrumentKind",
    "ProviderHealth",
    "ProviderRegistry",
    "QuoteChain",
    "QuoteProvider",
    "ResolvedQuote",
    "parse_price",
]
