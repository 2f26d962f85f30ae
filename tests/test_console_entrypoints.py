"""Verify CLI modules expose main(), quoteboard --help works, and refresh exit codes."""

from __future__ import annotations

import json
import subprocess
import sys
from importlib import import_module
from pathlib import Path

import pytest

from quoteboard.cli import refresh as refresh_cli

_CLI_MODULES = [
    "quoteboard.cli.main",
    "quoteboard.cli.refresh",
    "quoteboard.cli.providers",
]


@pytest.mark.parametrize("module_name", _CLI_MODULES)
def test_cli_module_has_main(module_name):
    mod = import_module(module_name)
    assert hasattr(mod, "main"), f"{module_name} missing main()"
    assert callable(mod.main), f"{module_name}.main not callable"


def test_cli_main_help_exits_zero():
    """cli.main.main(["--help"]) exits with 0 (in-process)."""
    from quoteboard.cli.main import main

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_quoteboard_help_exits_zero():
    """python -m quoteboard --help exits 0 and lists commands (subprocess)."""
    r = subprocess.run(
        [sys.executable, "-m", "quoteboard", "--help"],
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert r.returncode == 0, (r.stdout or "") + (r.stderr or "")
    assert "refresh" in r.stdout


@pytest.fixture
def keyless_config(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.delenv("TWELVE_DATA_API_KEY", raising=False)
    monkeypatch.delenv("QUOTEBOARD_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("QUOTEBOARD_TIMEOUT_S", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "resolver:\n"
        "  provider_order:\n"
        "    commodity: [twelvedata, goldapi]\n"
        "    fx_pair: [frankfurter]\n",
        encoding="utf-8",
    )
    return path


def test_refresh_missing_key_exits_2_before_network(keyless_config: Path, tmp_path: Path, monkeypatch):
    def _boom(*args, **kwargs):
        raise AssertionError("refresh must not run without required keys")

    monkeypatch.setattr(refresh_cli, "run_refresh", _boom)
    code = refresh_cli.main(["--config", str(keyless_config), "--out", str(tmp_path / "out")])
    assert code == refresh_cli.EXIT_CONFIG
    assert not (tmp_path / "out").exists()


def test_refresh_write_failure_exits_3(keyless_config: Path, tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TWELVE_DATA_API_KEY", "k")
    from quoteboard.core.errors import SnapshotWriteError

    def _fail(*args, **kwargs):
        raise SnapshotWriteError("disk full")

    monkeypatch.setattr(refresh_cli, "run_refresh", _fail)
    code = refresh_cli.main(["--config", str(keyless_config), "--out", str(tmp_path / "out")])
    assert code == refresh_cli.EXIT_WRITE


def test_refresh_writes_snapshots(keyless_config: Path, tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TWELVE_DATA_API_KEY", "k")
    monkeypatch.setenv("QUOTEBOARD_DETERMINISTIC_TIME", "2026-01-01T00:00:00Z")

    from quoteboard.providers.base import InstrumentKind
    from quoteboard.providers.chain import QuoteChain
    from tests.fakes.providers import FakeQuoteProvider, FakeQuoteProviderAlwaysFail

    fake_chains = {
        InstrumentKind.COMMODITY: QuoteChain([FakeQuoteProviderAlwaysFail("a"), FakeQuoteProvider("b", {"OIL": 82.37})]),
        InstrumentKind.FX_PAIR: QuoteChain([FakeQuoteProviderAlwaysFail("x")]),
    }
    monkeypatch.setattr(refresh_cli, "create_chains", lambda config, registry=None: fake_chains)

    out = tmp_path / "out"
    code = refresh_cli.main(["--config", str(keyless_config), "--out", str(out), "--log-level", "WARNING"])
    assert code == refresh_cli.EXIT_OK

    commodities = json.loads((out / "commodities.json").read_text(encoding="utf-8"))
    pairs = json.loads((out / "pairs.json").read_text(encoding="utf-8"))
    assert commodities["generated_at"] == "2026-01-01T00:00:00Z"
    assert commodities["commodities"]["OIL"] == {"price": 82.37, "source": "b"}
    assert commodities["commodities"]["XAU/USD"] is None
    assert pairs["pairs"]["EUR/USD"] is None


def test_providers_command_lists_builtins(capsys, keyless_config: Path):
    from quoteboard.cli import providers as providers_cli

    assert providers_cli.main(["--config", str(keyless_config)]) == 0
    out = capsys.readouterr().out
    assert "twelvedata" in out and "key MISSING" in out
    assert "fx_pair: frankfurter" in out


def test_refresh_logger_named_after_module():
    assert refresh_cli.logger.name == "quoteboard.cli.refresh"


def test_refresh_null_resolver_section_exits_2(tmp_path: Path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("resolver: null\n", encoding="utf-8")
    monkeypatch.setattr(refresh_cli, "create_chains", lambda *a, **k: pytest.fail("no chains on bad config"))
    code = refresh_cli.main(["--config", str(path), "--out", str(tmp_path / "out")])
    assert code == refresh_cli.EXIT_CONFIG


def test_refresh_null_instrument_list_exits_2(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("TWELVE_DATA_API_KEY", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "resolver:\n"
        "  provider_order:\n"
        "    commodity: [goldapi]\n"
        "    fx_pair: [frankfurter]\n"
        "instruments:\n"
        "  commodities: null\n",
        encoding="utf-8",
    )
    code = refresh_cli.main(["--config", str(path), "--out", str(tmp_path / "out")])
    assert code == refresh_cli.EXIT_CONFIG


def test_refresh_unopenable_log_file_exits_2(keyless_config: Path, tmp_path: Path, capsys):
    log_file = tmp_path / "missing" / "refresh.log"
    code = refresh_cli.main(["--config", str(keyless_config), "--out", str(tmp_path / "out"), "--log-file", str(log_file)])
    assert code == refresh_cli.EXIT_CONFIG
    assert "cannot open log file" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_refresh_closes_chains(keyless_config: Path, tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TWELVE_DATA_API_KEY", "k")

    from quoteboard.core.errors import SnapshotWriteError
    from quoteboard.providers.base import InstrumentKind
    from quoteboard.providers.chain import QuoteChain
    from tests.fakes.providers import FakeQuoteProvider

    providers = [FakeQuoteProvider("c"), FakeQuoteProvider("f")]
    fake_chains = {
        InstrumentKind.COMMODITY: QuoteChain([providers[0]]),
        InstrumentKind.FX_PAIR: QuoteChain([providers[1]]),
    }
    monkeypatch.setattr(refresh_cli, "create_chains", lambda config, registry=None: fake_chains)

    def _fail(*args, **kwargs):
        raise SnapshotWriteError("disk full")

    monkeypatch.setattr(refresh_cli, "run_refresh", _fail)
    code = refresh_cli.main(["--config", str(keyless_config), "--out", str(tmp_path / "out")])
    assert code == refresh_cli.EXIT_WRITE
    assert [p.close_count for p in providers] == [1, 1]
