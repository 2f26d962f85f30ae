"""
Quote chain: ordered provider fallback for one instrument kind.

A chain tries providers in static priority order, each exactly once per
resolution. The first provider returning a finite positive price wins.
Failures (exceptions, no data, invalid numbers) are logged and the next
provider is tried. Exhausting the list yields None, which is a valid outcome.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..timeutils import now_utc_iso
from .base import Instrument, ProviderHealth, QuoteProvider, ResolvedQuote, parse_price

logger = logging.getLogger(__name__)


class QuoteChain:
    """
    Ordered chain of quote providers with fallback.

    No retries within a provider and no caching across calls: each
    resolve() is a fresh, strictly sequential walk down the provider list.
    """

    def __init__(self, providers: Sequence[QuoteProvider], name: str = "quotes") -> None:
        self._providers: List[QuoteProvider] = list(providers)
        self.name = name
        self._health: Dict[str, ProviderHealth] = {
            p.provider_name: ProviderHealth(provider_name=p.provider_name) for p in self._providers
        }

    @property
    def provider_names(self) -> List[str]:
        return [p.provider_name for p in self._providers]

    def resolve(self, instrument: Instrument) -> Optional[ResolvedQuote]:
        """
        Resolve an instrument using the provider chain.

        Returns the first accepted quote, or None when every provider failed.
        """
        errors: List[str] = []
        tried: List[str] = []
        for provider in self._providers:
            name = provider.provider_name
            supports = getattr(provider, "supports", None)
            if supports is not None and instrument.kind not in supports:
                continue
            # Each provider at most once per resolution, even if listed twice.
            if name in tried:
                continue
            tried.append(name)

            health = self._health[name]
            try:
                raw = provider.try_fetch(instrument)
            except Exception as exc:
                msg = f"{name}: {type(exc).__name__}: {exc}"
                errors.append(msg)
                health.record_failure(str(exc))
                logger.warning("%s via %s failed: %s", instrument.symbol, name, exc)
                continue

            price = parse_price(raw)
            if price is None:
                msg = f"{name}: no usable price (got {raw!r})"
                errors.append(msg)
                health.record_failure(msg)
                logger.warning("%s via %s: no usable price (got %r)", instrument.symbol, name, raw)
                continue

            health.record_success()
            logger.debug("%s = %s via %s", instrument.symbol, price, name)
            return ResolvedQuote(
                symbol=instrument.symbol,
                price=price,
                provider_name=name,
                fetched_at_utc=now_utc_iso(),
            )

        logger.warning(
            "All %s providers failed for %s: %s",
            self.name, instrument.symbol, "; ".join(errors) or "no provider supports this instrument",
        )
        return None

    def resolve_price(self, instrument: Instrument) -> Optional[float]:
        """resolve() reduced to the bare price (or None)."""
        quote = self.resolve(instrument)
        return quote.price if quote is not None else None

    def get_health(self) -> Dict[str, ProviderHealth]:
        """Return health counters for all providers in the chain."""
        return dict(self._health)

    def close(self) -> None:
        """Release provider resources (HTTP sessions). Safe to call more than once."""
        for provider in self._providers:
            close = getattr(provider, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> "QuoteChain":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
