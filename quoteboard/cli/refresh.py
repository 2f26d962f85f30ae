"""
Resolve all configured instruments and write commodities.json / pairs.json.
Use: quoteboard refresh [--out DIR] [--config PATH] [--log-level LEVEL] [--log-file PATH]
Exit: 0 written (unresolved instruments are null), 2 config error, 3 write error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from quoteboard.config import get_config, load_resolver_config, output_dir
from quoteboard.core.errors import ConfigError, SnapshotWriteError
from quoteboard.providers.defaults import create_chains, create_default_registry
from quoteboard.refresh import ENTITY_LAYOUT, build_instruments, run_refresh

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_WRITE = 3

logger = logging.getLogger(__name__)


def configure_logging(level: str, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(
        prog="quoteboard refresh",
        description="Fetch metal, oil and FX quotes and write static JSON snapshots.",
    )
    ap.add_argument("--out", default=None, help="Output directory (default: output.dir from config, dist/data)")
    ap.add_argument("--config", default=None, help="Path to config.yaml (default: repo root or QUOTEBOARD_CONFIG)")
    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    ap.add_argument("--log-file", default=None, help="Also append log output to this file")
    args = ap.parse_args(argv)

    try:
        configure_logging(args.log_level, args.log_file)
    except OSError as e:
        print(f"cannot open log file {args.log_file}: {e}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        cfg = get_config(Path(args.config) if args.config else None)
        resolver_config = load_resolver_config(cfg)
        registry = create_default_registry()
        resolver_config.require_keys(registry)
        instruments = {entity: build_instruments(entity, cfg) for entity in ENTITY_LAYOUT}
        out_dir = Path(args.out or output_dir(cfg))
    except (ConfigError, ValueError) as e:
        logger.error("configuration error: %s", e)
        return EXIT_CONFIG

    chains = create_chains(resolver_config, registry)
    try:
        run_refresh(resolver_config, out_dir, chains=chains, instruments=instruments)
    except SnapshotWriteError as e:
        logger.error("write failed: %s", e)
        return EXIT_WRITE
    finally:
        for chain in chains.values():
            chain.close()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
