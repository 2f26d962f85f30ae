"""Foreign-exchange rate providers (keyless, nested rate objects)."""
from __future__ import annotations

from .exchangerate import ExchangeRateProvider
from .frankfurter import FrankfurterProvider

__all__ = ["ExchangeRateProvider", "FrankfurterProvider"]
