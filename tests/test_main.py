"""Tests for the command-line orchestrator."""

import argparse
import sys

import pytest

from config.settings import Settings, get_settings
from config.strategy_params import ConfigurationError, StrategyKind
from main import MevScanner, build_configs, main
from src.api import MockSnapshotSource, NodeCheckedSource
from src.scanner.scan_loop import ScanState


def make_args(**overrides):
    values = dict(strategy=None, target_spread=None, interval_ms=None)
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture
def settings():
    return Settings(_env_file=None, rpc_url="http://localhost:8899", feed_url=None)


class TestBuildConfigs:
    """Tests for build_configs."""

    def test_defaults_from_settings(self, settings):
        configs = build_configs(settings, make_args())

        assert len(configs) == 1
        assert configs[0].strategy == settings.strategy
        assert configs[0].threshold == settings.target_spread_pct

    def test_both_strategies(self, settings):
        configs = build_configs(settings, make_args(strategy="both"))

        assert [c.strategy for c in configs] == [StrategyKind.ARBITRAGE, StrategyKind.SANDWICH]

    def test_cli_overrides(self, settings):
        configs = build_configs(
            settings, make_args(strategy="arbitrage", target_spread=0.3, interval_ms=1500)
        )

        assert configs[0].threshold == 0.3
        assert configs[0].poll_interval_seconds == 1.5

    def test_invalid_interval(self, settings):
        with pytest.raises(ConfigurationError):
            build_configs(settings, make_args(interval_ms=0))


class TestMevScanner:
    """Tests for MevScanner wiring."""

    @pytest.mark.asyncio
    async def test_mock_scan_once(self, settings):
        """Test a single tick per strategy over sample data."""
        configs = build_configs(settings, make_args(strategy="both"))
        scanner = MevScanner(settings, configs)

        await scanner.initialize(use_mock=True)
        await scanner.scan_once()

        assert len(scanner.loops) == 2
        assert all(isinstance(s, MockSnapshotSource) for s in scanner.sources)
        assert scanner.sources[0] is not scanner.sources[1]
        assert all(loop.stats.ticks == 1 for loop in scanner.loops)

        await scanner.cleanup()

    @pytest.mark.asyncio
    async def test_node_checked_by_default(self, settings):
        """Test live runs gate the sample data on the node health check."""
        scanner = MevScanner(settings, build_configs(settings, make_args()))

        await scanner.initialize()

        assert isinstance(scanner.sources[0], NodeCheckedSource)
        await scanner.cleanup()

    @pytest.mark.asyncio
    async def test_monitor_with_max_ticks(self, settings, tmp_path):
        """Test a bounded monitor run writes plans and stops."""
        plans_file = tmp_path / "plans.jsonl"
        configs = build_configs(settings, make_args(target_spread=0.2, interval_ms=10))
        scanner = MevScanner(settings, configs)

        await scanner.initialize(use_mock=True, plans_file=str(plans_file))
        await scanner.monitor(max_ticks=2)
        await scanner.cleanup()

        assert scanner.loops[0].state == ScanState.STOPPED
        assert len(plans_file.read_text(encoding="utf-8").splitlines()) == 4

    def test_stop_cancels_token(self, settings):
        scanner = MevScanner(settings, build_configs(settings, make_args()))

        scanner.stop()

        assert scanner.token.cancelled


class TestMainEntry:
    """Tests for the CLI entry point."""

    @pytest.fixture(autouse=True)
    def clear_settings_cache(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    @pytest.mark.asyncio
    async def test_bad_environment_exits_with_status_1(self, monkeypatch):
        """Test an unparsable setting ends the run cleanly with status 1."""
        monkeypatch.setenv("STRATEGY", "foo")
        monkeypatch.setattr(sys, "argv", ["main.py", "scan", "--mock"])

        with pytest.raises(SystemExit) as exc_info:
            await main()

        assert exc_info.value.code == 1
