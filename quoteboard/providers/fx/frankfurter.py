"""
Frankfurter (ECB reference rates) FX provider.

No authentication required:
  GET https://api.frankfurter.app/latest?from=EUR&to=USD
  -> {"base": "EUR", "date": "...", "rates": {"USD": 1.0841}}
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import requests

from ..base import Instrument, InstrumentKind, parse_price
from ..http import get_json

if TYPE_CHECKING:
    from ...config import ResolverConfig

FRANKFURTER_BASE_URL = "https://api.frankfurter.app"
HTTP_TIMEOUT_S = 10.0


class FrankfurterProvider:
    """Fetch daily ECB reference rates for a currency pair."""

    requires_key = False
    supports = frozenset({InstrumentKind.FX_PAIR})

    def __init__(self, timeout_s: float = HTTP_TIMEOUT_S, session: Optional[requests.Session] = None) -> None:
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: "ResolverConfig") -> "FrankfurterProvider":
        return cls(timeout_s=config.timeout_s)

    @property
    def provider_name(self) -> str:
        return "frankfurter"

    def close(self) -> None:
        self._session.close()

    def try_fetch(self, instrument: Instrument) -> Optional[float]:
        base, quote = instrument.legs
        if not quote:
            return None
        payload = get_json(
            self._session,
            f"{FRANKFURTER_BASE_URL}/latest",
            provider=self.provider_name,
            timeout=self.timeout_s,
            params={"from": base, "to": quote},
        )
        rates = payload.get("rates")
        if not isinstance(rates, dict):
            return None
        return parse_price(rates.get(quote))
