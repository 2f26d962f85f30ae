"""
Twelve Data price provider (commodities and FX pairs).

Requires an API key:
  GET https://api.twelvedata.com/price?symbol={symbol}&apikey={key}
  -> {"price": "82.37"}

Errors come back as HTTP 200 with {"status": "error", "code": 4xx, "message": ...}.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import requests

from ..core.errors import ProviderError
from .base import Instrument, InstrumentKind, parse_price
from .http import get_json

if TYPE_CHECKING:
    from ..config import ResolverConfig

TWELVE_DATA_BASE_URL = "https://api.twelvedata.com"
HTTP_TIMEOUT_S = 10.0

# Logical symbol -> Twelve Data symbol, where they differ.
_SYMBOL_MAP = {
    "OIL": "WTI/USD",
    "BRENT": "XBR/USD",
}


class TwelveDataProvider:
    """Fetch latest prices from the Twelve Data /price endpoint."""

    requires_key = True
    supports = frozenset({InstrumentKind.COMMODITY, InstrumentKind.FX_PAIR})

    def __init__(
        self,
        api_key: str,
        timeout_s: float = HTTP_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: "ResolverConfig") -> "TwelveDataProvider":
        return cls(api_key=config.key_for("twelvedata"), timeout_s=config.timeout_s)

    @property
    def provider_name(self) -> str:
        return "twelvedata"

    def close(self) -> None:
        self._session.close()

    def try_fetch(self, instrument: Instrument) -> Optional[float]:
        if not self.api_key:
            raise ProviderError("Missing TWELVE_DATA_API_KEY", provider=self.provider_name)

        symbol = _SYMBOL_MAP.get(instrument.symbol, instrument.symbol)
        payload = get_json(
            self._session,
            f"{TWELVE_DATA_BASE_URL}/price",
            provider=self.provider_name,
            timeout=self.timeout_s,
            params={"symbol": symbol, "apikey": self.api_key},
        )
        if payload.get("status") == "error":
            raise ProviderError(
                f"Twelve Data error: {payload.get('message', 'unknown error')}",
                provider=self.provider_name,
                status_code=payload.get("code"),
                payload=payload,
            )
        return parse_price(payload.get("price"))
