"""
gold-api.com spot price provider.

Public endpoint (an access token is sent when configured):
  GET https://api.gold-api.com/price/{metal}
  -> {"name": "Gold", "symbol": "XAU", "price": 2401.3, "currency": "USD"}

Only USD-quoted metals are served; anything else is "no data".
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

import requests

from ..base import Instrument, InstrumentKind, parse_price
from ..http import get_json
from ...core.errors import ProviderError

if TYPE_CHECKING:
    from ...config import ResolverConfig

GOLD_API_BASE_URL = "https://api.gold-api.com"
HTTP_TIMEOUT_S = 10.0

_METALS = frozenset({"XAU", "XAG", "XPT", "XPD"})


class GoldApiProvider:
    """Fetch metal spot prices in USD per troy ounce."""

    requires_key = False
    supports = frozenset({InstrumentKind.COMMODITY})

    def __init__(
        self,
        api_key: str = "",
        timeout_s: float = HTTP_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: "ResolverConfig") -> "GoldApiProvider":
        return cls(api_key=config.key_for("goldapi"), timeout_s=config.timeout_s)

    @property
    def provider_name(self) -> str:
        return "goldapi"

    def close(self) -> None:
        self._session.close()

    def try_fetch(self, instrument: Instrument) -> Optional[float]:
        metal, quote = instrument.legs
        if metal not in _METALS or quote not in ("", "USD"):
            return None

        headers: Dict[str, str] = {}
        if self.api_key:
            headers["x-access-token"] = self.api_key

        payload = get_json(
            self._session,
            f"{GOLD_API_BASE_URL}/price/{metal}",
            provider=self.provider_name,
            timeout=self.timeout_s,
            headers=headers,
        )
        currency = str(payload.get("currency", "USD")).upper()
        if currency != "USD":
            raise ProviderError(
                f"gold-api returned {currency} for {metal}, expected USD",
                provider=self.provider_name,
                payload=payload,
            )
        return parse_price(payload.get("price"))
