"""
Default provider registry configuration.

Registers built-in providers and builds one chain per instrument kind from
the configured priority lists. To add a provider, register it here and add
its name to resolver.provider_order in config.yaml.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional

from .base import InstrumentKind
from .chain import QuoteChain
from .fx import ExchangeRateProvider, FrankfurterProvider
from .metals import GoldApiProvider
from .registry import ProviderRegistry
from .twelvedata import TwelveDataProvider

if TYPE_CHECKING:
    from ..config import ResolverConfig

logger = logging.getLogger(__name__)


def create_default_registry() -> ProviderRegistry:
    """Create a registry with all built-in providers."""
    registry = ProviderRegistry()
    registry.register("twelvedata", TwelveDataProvider)
    registry.register("goldapi", GoldApiProvider)
    registry.register("frankfurter", FrankfurterProvider)
    registry.register("exchangerate", ExchangeRateProvider)
    return registry


def create_chains(
    config: "ResolverConfig",
    registry: Optional[ProviderRegistry] = None,
) -> Dict[InstrumentKind, QuoteChain]:
    """Build a QuoteChain for every instrument kind from config.provider_order."""
    reg = registry or create_default_registry()
    chains: Dict[InstrumentKind, QuoteChain] = {}
    for kind in InstrumentKind:
        order = config.order_for(kind)
        providers = reg.build_chain(order, config)
        chains[kind] = QuoteChain(providers, name=kind.value)
        logger.debug("%s chain: %s", kind.value, " -> ".join(order) or "(empty)")
    return chains
