"""
Quote snapshots: the JSON documents the dashboard page reads.

Shape:
    {"generated_at": "2026-01-01T00:00:00Z",
     "<entity>": {"<symbol>": {"price": 82.37, "source": "twelvedata"} | null}}

A snapshot is written whole on every refresh; there is no merge with the
previous file. Unresolved instruments are explicit nulls, never zero.
"""
from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .core.errors import SnapshotWriteError
from .providers.base import ResolvedQuote

logger = logging.getLogger(__name__)

ENTITIES = ("commodities", "pairs")


def _current_umask() -> int:
    # os.umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


@dataclass(frozen=True)
class QuoteEntry:
    price: float
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"price": self.price}
        if self.source:
            out["source"] = self.source
        return out

    @classmethod
    def from_quote(cls, quote: ResolvedQuote) -> "QuoteEntry":
        return cls(price=quote.price, source=quote.provider_name)


@dataclass(frozen=True)
class QuoteSnapshot:
    """One resolution cycle's results for a single entity (commodities or pairs)."""

    entity: str
    generated_at: str
    quotes: Mapping[str, Optional[QuoteEntry]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.entity not in ENTITIES:
            raise ValueError(f"Unknown snapshot entity {self.entity!r}; expected one of {ENTITIES}")
        for symbol, entry in self.quotes.items():
            if entry is None:
                continue
            price = entry.price
            if isinstance(price, bool) or not isinstance(price, (int, float)):
                raise ValueError(f"{symbol}: price must be a number, got {price!r}")
            if not math.isfinite(price) or price <= 0:
                raise ValueError(f"{symbol}: price must be finite and positive, got {price!r}")
        object.__setattr__(self, "quotes", dict(self.quotes))

    @classmethod
    def from_resolved(
        cls,
        entity: str,
        generated_at: str,
        resolved: Mapping[str, Optional[ResolvedQuote]],
    ) -> "QuoteSnapshot":
        quotes = {
            symbol: QuoteEntry.from_quote(q) if q is not None else None
            for symbol, q in resolved.items()
        }
        return cls(entity=entity, generated_at=generated_at, quotes=quotes)

    def prices(self) -> Dict[str, Optional[float]]:
        return {s: (e.price if e is not None else None) for s, e in self.quotes.items()}

    @property
    def resolved_count(self) -> int:
        return sum(1 for e in self.quotes.values() if e is not None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            self.entity: {s: (e.to_dict() if e is not None else None) for s, e in self.quotes.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], entity: str) -> "QuoteSnapshot":
        generated_at = data.get("generated_at")
        body = data.get(entity)
        if not isinstance(generated_at, str) or not isinstance(body, dict):
            raise ValueError(f"Snapshot missing generated_at or {entity!r} object")
        quotes: Dict[str, Optional[QuoteEntry]] = {}
        for symbol, raw in body.items():
            if raw is None:
                quotes[symbol] = None
            elif isinstance(raw, dict) and "price" in raw:
                quotes[symbol] = QuoteEntry(price=raw["price"], source=raw.get("source"))
            else:
                raise ValueError(f"{symbol}: expected {{price: ...}} or null, got {raw!r}")
        return cls(entity=entity, generated_at=generated_at, quotes=quotes)


def write_snapshot(snapshot: QuoteSnapshot, path: Union[str, Path]) -> Path:
    """
    Write the snapshot as pretty JSON, replacing the target atomically.
    Any filesystem failure is raised as SnapshotWriteError.
    """
    target = Path(path)
    tmp_name: Optional[str] = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_dict(), f, indent=2, allow_nan=False)
            f.write("\n")
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as exc:
        raise SnapshotWriteError(f"Failed to write {target}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    logger.debug("Wrote %s (%d/%d resolved)", target, snapshot.resolved_count, len(snapshot.quotes))
    return target


def read_snapshot(path: Union[str, Path], entity: str) -> QuoteSnapshot:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: snapshot must be a JSON object")
    return QuoteSnapshot.from_dict(data, entity)
