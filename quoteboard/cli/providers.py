"""
List registered providers, the instrument kinds they serve, and the configured order.
Use: quoteboard providers [--config PATH]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from quoteboard.config import get_config, load_resolver_config
from quoteboard.core.errors import ConfigError
from quoteboard.providers.base import InstrumentKind
from quoteboard.providers.defaults import create_default_registry


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(prog="quoteboard providers", description="Show providers and priority order.")
    ap.add_argument("--config", default=None, help="Path to config.yaml")
    args = ap.parse_args(argv)

    try:
        config = load_resolver_config(get_config(Path(args.config) if args.config else None))
    except ConfigError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return 2

    registry = create_default_registry()
    for name in registry.names:
        factory = registry.factory(name)
        kinds = ",".join(sorted(k.value for k in getattr(factory, "supports", ())))
        if registry.requires_key(name):
            key_state = "key set" if config.key_for(name) else "key MISSING"
        else:
            key_state = "no key needed"
        print(f"{name:<14} {kinds:<18} {key_state}")
    print()
    for kind in InstrumentKind:
        print(f"{kind.value}: {' -> '.join(config.order_for(kind)) or '(none)'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
