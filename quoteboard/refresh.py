"""
Refresh cycle: resolve every configured instrument and write both snapshots.

Callers (CLI, tests) use run_refresh(); it owns chain construction, the
shared generated_at timestamp and the output files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .config import ResolverConfig, get_config, instrument_symbols
from .providers.base import Instrument, InstrumentKind, ResolvedQuote
from .providers.chain import QuoteChain
from .providers.defaults import create_chains
from .snapshot import QuoteSnapshot, write_snapshot
from .timeutils import now_utc_iso

logger = logging.getLogger(__name__)

COMMODITIES_FILE = "commodities.json"
PAIRS_FILE = "pairs.json"

# Entity -> (output file, instrument kind)
ENTITY_LAYOUT = {
    "commodities": (COMMODITIES_FILE, InstrumentKind.COMMODITY),
    "pairs": (PAIRS_FILE, InstrumentKind.FX_PAIR),
}


@dataclass(frozen=True)
class RefreshResult:
    """Snapshots produced by one cycle and the paths they were written to."""

    commodities: QuoteSnapshot
    pairs: QuoteSnapshot
    paths: Dict[str, Path]

    @property
    def unresolved(self) -> List[str]:
        return [
            symbol
            for snap in (self.commodities, self.pairs)
            for symbol, entry in snap.quotes.items()
            if entry is None
        ]


def build_instruments(entity: str, cfg: Optional[dict] = None) -> List[Instrument]:
    """Instrument catalog for an entity from config (defaults: gold, silver, oil and six majors)."""
    _, kind = ENTITY_LAYOUT[entity]
    return [Instrument(symbol, kind) for symbol in instrument_symbols(entity, cfg)]


def resolve_all(chain: QuoteChain, instruments: Sequence[Instrument]) -> Dict[str, Optional[ResolvedQuote]]:
    """Resolve instruments one after another; a failed instrument maps to None."""
    return {inst.symbol: chain.resolve(inst) for inst in instruments}


def _log_health(chains: Mapping[InstrumentKind, QuoteChain], log: logging.Logger) -> None:
    for kind, chain in chains.items():
        for name, health in chain.get_health().items():
            if health.failures:
                log.info(
                    "provider %s [%s]: %s ok=%d failed=%d last_error=%s",
                    name, kind.value, health.status, health.successes, health.failures, health.last_error,
                )


def run_refresh(
    config: ResolverConfig,
    out_dir: Union[str, Path],
    *,
    chains: Optional[Mapping[InstrumentKind, QuoteChain]] = None,
    instruments: Optional[Mapping[str, Sequence[Instrument]]] = None,
    now: Optional[str] = None,
    log: Optional[logging.Logger] = None,
) -> RefreshResult:
    """
    Run one refresh cycle: resolve commodities and pairs, write commodities.json
    and pairs.json into out_dir. Unresolved instruments become null; the cycle
    only fails if a file cannot be written (SnapshotWriteError propagates).
    If chains or instruments are provided they are used instead of the defaults (for tests).
    """
    _log = log if log is not None else logger
    owns_chains = chains is None
    if chains is None:
        chains = create_chains(config)
    try:
        return _run_cycle(out_dir, chains, instruments, now, _log)
    finally:
        if owns_chains:
            for chain in chains.values():
                chain.close()


def _run_cycle(
    out_dir: Union[str, Path],
    chains: Mapping[InstrumentKind, QuoteChain],
    instruments: Optional[Mapping[str, Sequence[Instrument]]],
    now: Optional[str],
    _log: logging.Logger,
) -> RefreshResult:
    if instruments is None:
        cfg = get_config()
        instruments = {entity: build_instruments(entity, cfg) for entity in ENTITY_LAYOUT}

    generated_at = now or now_utc_iso()
    out_path = Path(out_dir)
    snapshots: Dict[str, QuoteSnapshot] = {}
    paths: Dict[str, Path] = {}

    for entity, (_, kind) in ENTITY_LAYOUT.items():
        resolved = resolve_all(chains[kind], instruments.get(entity, ()))
        snapshots[entity] = QuoteSnapshot.from_resolved(entity, generated_at, resolved)

    # Written only after every resolution has finished.
    for entity, (filename, _) in ENTITY_LAYOUT.items():
        paths[entity] = write_snapshot(snapshots[entity], out_path / filename)

    result = RefreshResult(commodities=snapshots["commodities"], pairs=snapshots["pairs"], paths=paths)
    summary = "  ".join(
        f"{entity}={snap.resolved_count}/{len(snap.quotes)}" for entity, snap in snapshots.items()
    )
    _log.info("%s  refreshed  %s  -> %s", generated_at, summary, out_path)
    if result.unresolved:
        _log.warning("unresolved this cycle: %s", ", ".join(result.unresolved))
    _log_health(chains, _log)
    return result
