"""
Load config from config.yaml with optional env overrides.
Single source of truth for provider order, timeouts, output dir and instruments.

The resolver never reads the environment itself: load_resolver_config() turns
the merged config into a ResolverConfig that is passed in explicitly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .core.errors import ConfigError
from .providers.base import InstrumentKind

if TYPE_CHECKING:
    from .providers.registry import ProviderRegistry

# Defaults if no YAML or env
_DEFAULTS = {
    "resolver": {
        "timeout_s": 10.0,
        "provider_order": {
            "commodity": ["twelvedata", "goldapi"],
            "fx_pair": ["twelvedata", "frankfurter", "exchangerate"],
        },
    },
    "output": {"dir": "dist/data"},
    "instruments": {
        "commodities": ["XAU/USD", "XAG/USD", "OIL"],
        "pairs": ["EUR/USD", "GBP/USD", "USD/JPY", "USD/CHF", "AUD/USD", "USD/CAD"],
    },
}

# Provider name -> env var holding its API key
PROVIDER_KEY_ENV = {
    "twelvedata": "TWELVE_DATA_API_KEY",
    "goldapi": "GOLDAPI_KEY",
}


def _config_yaml_path() -> Path:
    """Config.yaml lives at repo root (parent of package dir) unless QUOTEBOARD_CONFIG points elsewhere."""
    override = os.environ.get("QUOTEBOARD_CONFIG", "").strip()
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml(path: Optional[Path] = None) -> dict:
    config_path = path or _config_yaml_path()
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    timeout = os.environ.get("QUOTEBOARD_TIMEOUT_S")
    if timeout:
        overrides.setdefault("resolver", {})["timeout_s"] = timeout
    out_dir = os.environ.get("QUOTEBOARD_OUTPUT_DIR")
    if out_dir:
        overrides.setdefault("output", {})["dir"] = out_dir
    return overrides


def get_config(path: Optional[Path] = None) -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml(path))
    merged = _deep_merge(merged, _env_overrides())
    return merged


def _section(cfg: dict, name: str) -> dict:
    value = cfg.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping, got {value!r}")
    return value


def output_dir(cfg: Optional[dict] = None) -> str:
    out = _section(cfg or get_config(), "output").get("dir")
    if not isinstance(out, str) or not out.strip():
        raise ConfigError(f"output.dir must be a non-empty path, got {out!r}")
    return out


def instrument_symbols(entity: str, cfg: Optional[dict] = None) -> List[str]:
    symbols = _section(cfg or get_config(), "instruments").get(entity, [])
    if isinstance(symbols, str) or not isinstance(symbols, (list, tuple)):
        raise ConfigError(f"instruments.{entity} must be a list of symbols, got {symbols!r}")
    return [str(s) for s in symbols]


@dataclass(frozen=True)
class ResolverConfig:
    """Explicit resolver settings: provider keys, per-call timeout, provider order per kind."""

    provider_keys: Mapping[str, str] = field(default_factory=dict)
    timeout_s: float = 10.0
    provider_order: Mapping[InstrumentKind, Tuple[str, ...]] = field(default_factory=dict)

    def key_for(self, provider: str) -> str:
        return self.provider_keys.get(provider, "")

    def order_for(self, kind: InstrumentKind) -> Tuple[str, ...]:
        return tuple(self.provider_order.get(kind, ()))

    def require_keys(self, registry: "ProviderRegistry") -> None:
        """Raise ConfigError if any configured provider is unknown or lacks its required key."""
        missing: List[str] = []
        for kind in InstrumentKind:
            for name in self.order_for(kind):
                try:
                    needs_key = registry.requires_key(name)
                except KeyError as exc:
                    raise ConfigError(str(exc.args[0])) from exc
                if needs_key and not self.key_for(name):
                    env_name = PROVIDER_KEY_ENV.get(name, name.upper() + "_API_KEY")
                    if env_name not in missing:
                        missing.append(env_name)
        if missing:
            raise ConfigError(f"Missing API key(s): {', '.join(missing)}")


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"resolver.timeout_s must be a number, got {value!r}") from None
    if timeout <= 0:
        raise ConfigError(f"resolver.timeout_s must be positive, got {timeout}")
    return timeout


def _parse_order(raw: Any) -> Dict[InstrumentKind, Tuple[str, ...]]:
    if not isinstance(raw, dict):
        raise ConfigError("resolver.provider_order must be a mapping of kind -> provider list")
    order: Dict[InstrumentKind, Tuple[str, ...]] = {}
    for kind_name, names in raw.items():
        try:
            kind = InstrumentKind(kind_name)
        except ValueError:
            raise ConfigError(f"Unknown instrument kind in provider_order: {kind_name!r}") from None
        if isinstance(names, str) or not isinstance(names, (list, tuple)):
            raise ConfigError(f"provider_order.{kind_name} must be a list of provider names")
        seen: List[str] = []
        for n in names:
            name = str(n).strip().lower()
            if name in seen:
                raise ConfigError(f"provider_order.{kind_name} lists {name!r} twice")
            seen.append(name)
        order[kind] = tuple(seen)
    return order


def load_resolver_config(
    cfg: Optional[dict] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolverConfig:
    """Build a ResolverConfig from merged config and environment (API keys only)."""
    cfg = cfg or get_config()
    env = os.environ if environ is None else environ
    resolver = _section(cfg, "resolver")
    keys = {name: env.get(var, "").strip() for name, var in PROVIDER_KEY_ENV.items()}
    return ResolverConfig(
        provider_keys=keys,
        timeout_s=_parse_timeout(resolver.get("timeout_s", _DEFAULTS["resolver"]["timeout_s"])),
        provider_order=_parse_order(resolver.get("provider_order", _DEFAULTS["resolver"]["provider_order"])),
    )
