"""
Snapshot file tests: JSON shape, null handling, positive-price invariant,
write/read round-trip and write failure surfacing.
"""

from __future__ import annotations

import json
import math
import os
import stat
import sys
from pathlib import Path

import pytest

from quoteboard.core.errors import SnapshotWriteError
from quoteboard.providers.base import ResolvedQuote
from quoteboard.snapshot import QuoteEntry, QuoteSnapshot, read_snapshot, write_snapshot

GENERATED_AT = "2026-01-01T00:00:00Z"


def _pairs_snapshot() -> QuoteSnapshot:
    return QuoteSnapshot(
        entity="pairs",
        generated_at=GENERATED_AT,
        quotes={
            "EUR/USD": None,
            "USD/JPY": QuoteEntry(price=151.234, source="twelvedata"),
            "GBP/USD": QuoteEntry(price=1.27125, source="frankfurter"),
        },
    )


def test_to_dict_shape_with_explicit_null():
    data = _pairs_snapshot().to_dict()
    assert data["generated_at"] == GENERATED_AT
    assert data["pairs"]["EUR/USD"] is None
    assert data["pairs"]["USD/JPY"] == {"price": 151.234, "source": "twelvedata"}


def test_entry_without_source_has_price_only():
    assert QuoteEntry(price=2.5).to_dict() == {"price": 2.5}


def test_from_resolved_keeps_order_and_provenance():
    resolved = {
        "XAU/USD": ResolvedQuote("XAU/USD", 2400.5, "goldapi", GENERATED_AT),
        "OIL": None,
    }
    snap = QuoteSnapshot.from_resolved("commodities", GENERATED_AT, resolved)
    assert list(snap.quotes) == ["XAU/USD", "OIL"]
    assert snap.prices() == {"XAU/USD": 2400.5, "OIL": None}
    assert snap.quotes["XAU/USD"].source == "goldapi"
    assert snap.resolved_count == 1


@pytest.mark.parametrize("bad", [0, 0.0, -1.0, float("nan"), float("inf")])
def test_snapshot_rejects_non_positive_or_non_finite(bad):
    with pytest.raises(ValueError):
        QuoteSnapshot("pairs", GENERATED_AT, {"EUR/USD": QuoteEntry(price=bad)})


def test_snapshot_rejects_non_numeric_price():
    with pytest.raises(ValueError):
        QuoteSnapshot("pairs", GENERATED_AT, {"EUR/USD": QuoteEntry(price="1.08")})  # type: ignore[arg-type]


def test_unknown_entity_rejected():
    with pytest.raises(ValueError, match="Unknown snapshot entity"):
        QuoteSnapshot("stocks", GENERATED_AT, {})


def test_snapshot_is_immutable_copy():
    quotes = {"OIL": QuoteEntry(price=82.37)}
    snap = QuoteSnapshot("commodities", GENERATED_AT, quotes)
    quotes["OIL"] = None
    assert snap.prices() == {"OIL": 82.37}


def test_write_then_read_round_trip(tmp_path: Path):
    snap = _pairs_snapshot()
    path = write_snapshot(snap, tmp_path / "nested" / "pairs.json")

    assert path.exists()
    loaded = read_snapshot(path, "pairs")
    assert loaded.prices() == snap.prices()
    assert loaded.generated_at == GENERATED_AT
    assert loaded == snap


def test_written_file_is_plain_json_without_nan(tmp_path: Path):
    path = write_snapshot(_pairs_snapshot(), tmp_path / "pairs.json")
    text = path.read_text(encoding="utf-8")
    assert "NaN" not in text
    data = json.loads(text)
    for entry in data["pairs"].values():
        assert entry is None or (entry["price"] > 0 and math.isfinite(entry["price"]))


def test_write_replaces_whole_file(tmp_path: Path):
    path = tmp_path / "commodities.json"
    write_snapshot(QuoteSnapshot("commodities", "2026-01-01T00:00:00Z", {"OIL": QuoteEntry(80.0)}), path)
    write_snapshot(QuoteSnapshot("commodities", "2026-01-01T01:00:00Z", {"XAU/USD": None}), path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"generated_at": "2026-01-01T01:00:00Z", "commodities": {"XAU/USD": None}}
    assert [p.name for p in tmp_path.iterdir()] == ["commodities.json"]


def test_write_failure_raises_snapshot_write_error(tmp_path: Path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(SnapshotWriteError):
        write_snapshot(_pairs_snapshot(), blocker / "pairs.json")


def test_read_rejects_malformed_body(tmp_path: Path):
    path = tmp_path / "pairs.json"
    path.write_text(json.dumps({"generated_at": GENERATED_AT, "pairs": {"EUR/USD": 1.08}}), encoding="utf-8")
    with pytest.raises(ValueError):
        read_snapshot(path, "pairs")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_written_file_is_world_readable_under_umask(tmp_path: Path):
    old = os.umask(0o022)
    try:
        path = write_snapshot(_pairs_snapshot(), tmp_path / "pairs.json")
    finally:
        os.umask(old)
    mode = stat.S_IMODE(path.stat().st_mode)
    assert mode == 0o644
    assert mode & stat.S_IROTH


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_written_file_mode_follows_umask(tmp_path: Path):
    old = os.umask(0o077)
    try:
        path = write_snapshot(_pairs_snapshot(), tmp_path / "pairs.json")
    finally:
        os.umask(old)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
