"""
ExchangeRate-API open access provider.

No authentication required:
  GET https://open.er-api.com/v6/latest/{base}
  -> {"result": "success", "base_code": "EUR", "rates": {"USD": 1.0839, ...}}
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import requests

from ..base import Instrument, InstrumentKind, parse_price
from ..http import get_json
from ...core.errors import ProviderError

if TYPE_CHECKING:
    from ...config import ResolverConfig

EXCHANGERATE_BASE_URL = "https://open.er-api.com"
HTTP_TIMEOUT_S = 10.0


class ExchangeRateProvider:
    """Fetch the latest open-access rate table for the pair's base currency."""

    requires_key = False
    supports = frozenset({InstrumentKind.FX_PAIR})

    def __init__(self, timeout_s: float = HTTP_TIMEOUT_S, session: Optional[requests.Session] = None) -> None:
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: "ResolverConfig") -> "ExchangeRateProvider":
        return cls(timeout_s=config.timeout_s)

    @property
    def provider_name(self) -> str:
        return "exchangerate"

    def close(self) -> None:
        self._session.close()

    def try_fetch(self, instrument: Instrument) -> Optional[float]:
        base, quote = instrument.legs
        if not quote:
            return None
        payload = get_json(
            self._session,
            f"{EXCHANGERATE_BASE_URL}/v6/latest/{base}",
            provider=self.provider_name,
            timeout=self.timeout_s,
        )
        if payload.get("result") != "success":
            raise ProviderError(
                f"ExchangeRate-API error: {payload.get('error-type', 'unknown')}",
                provider=self.provider_name,
                payload=payload,
            )
        rates = payload.get("rates")
        if not isinstance(rates, dict):
            return None
        return parse_price(rates.get(quote))
