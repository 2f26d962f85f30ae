"""
Provider interfaces and data contracts.

Every provider implements QuoteProvider: given an Instrument it returns a
price or None ("no data"), and may raise on transport failures. The chain
treats both outcomes the same way and moves on to the next provider.

Data is returned via frozen dataclasses for immutability.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, FrozenSet, Optional, Protocol, Tuple, runtime_checkable


class InstrumentKind(enum.Enum):
    """Resolution kind of an instrument; selects the provider order."""

    COMMODITY = "commodity"
    FX_PAIR = "fx_pair"


@dataclass(frozen=True)
class Instrument:
    """A tradable symbol being priced, e.g. XAU/USD, OIL or EUR/USD."""

    symbol: str
    kind: InstrumentKind

    def __post_init__(self) -> None:
        symbol = (self.symbol or "").strip().upper()
        if not symbol:
            raise ValueError("Instrument symbol must not be empty")
        if self.kind is InstrumentKind.FX_PAIR and len(symbol.split("/")) != 2:
            raise ValueError(f"FX pair must look like BASE/QUOTE, got {self.symbol!r}")
        object.__setattr__(self, "symbol", symbol)

    @property
    def legs(self) -> Tuple[str, str]:
        """(base, quote) for slash-separated symbols; (symbol, "") otherwise."""
        if "/" not in self.symbol:
            return self.symbol, ""
        base, quote = self.symbol.split("/", 1)
        return base, quote

    @property
    def base(self) -> str:
        return self.legs[0]

    @property
    def quote(self) -> str:
        return self.legs[1]


@dataclass(frozen=True)
class ResolvedQuote:
    """Immutable price accepted by the resolver for one instrument."""

    symbol: str
    price: float
    provider_name: str
    fetched_at_utc: str


@dataclass
class ProviderHealth:
    """Mutable per-cycle health counters for a single provider."""

    provider_name: str
    successes: int = 0
    failures: int = 0
    last_error: Optional[str] = None

    def record_success(self) -> None:
        self.successes += 1

    def record_failure(self, error: str) -> None:
        self.failures += 1
        self.last_error = error[:500]

    @property
    def status(self) -> str:
        if self.failures == 0:
            return "OK"
        if self.successes == 0:
            return "DOWN"
        return "DEGRADED"


@runtime_checkable
class QuoteProvider(Protocol):
    """Protocol for price providers."""

    requires_key: bool
    supports: FrozenSet[InstrumentKind]

    @property
    def provider_name(self) -> str: ...

    def try_fetch(self, instrument: Instrument) -> Optional[float]:
        """Fetch the current price for an instrument, or None when the provider has no data."""
        ...


def parse_price(value: Any) -> Optional[float]:
    """Return value as a finite, strictly positive float, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price
