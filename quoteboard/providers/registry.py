"""
Provider registry: central catalog of available providers.

Providers are registered by name. Configuration supplies a priority list per
instrument kind, and the registry turns it into an ordered provider list.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from .base import QuoteProvider

if TYPE_CHECKING:
    from ..config import ResolverConfig

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Registry mapping provider names to classes/instances.

    Classes are built with ``cls.from_config(config)`` on first use; ready
    instances are used as-is.

    Usage:
        registry = ProviderRegistry()
        registry.register("twelvedata", TwelveDataProvider)
        registry.register("frankfurter", FrankfurterProvider)

        providers = registry.build_chain(["twelvedata", "frankfurter"], config)
    """

    def __init__(self) -> None:
        self._factories: Dict[str, Any] = {}
        self._instances: Dict[str, QuoteProvider] = {}

    def register(self, name: str, factory: Any) -> None:
        """Register a provider class or instance by name."""
        self._factories[name] = factory
        self._instances.pop(name, None)
        logger.debug("Registered provider: %s", name)

    def factory(self, name: str) -> Any:
        try:
            return self._factories[name]
        except KeyError:
            raise KeyError(
                f"Unknown provider '{name}'. Available: {list(self._factories)}"
            ) from None

    def requires_key(self, name: str) -> bool:
        return bool(getattr(self.factory(name), "requires_key", False))

    def get(self, name: str, config: "ResolverConfig") -> QuoteProvider:
        """Get or instantiate a provider by name."""
        if name not in self._instances:
            factory = self.factory(name)
            if isinstance(factory, type):
                self._instances[name] = factory.from_config(config)
            else:
                self._instances[name] = factory
        return self._instances[name]

    @property
    def names(self) -> List[str]:
        return list(self._factories)

    def build_chain(self, priority: Sequence[str], config: "ResolverConfig") -> List[QuoteProvider]:
        """Build an ordered list of providers from a priority list."""
        return [self.get(n, config) for n in priority]
