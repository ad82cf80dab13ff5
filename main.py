#!/usr/bin/env python3
"""
MEV Opportunity Scanner

Continuously samples cross-venue prices and the pending-transaction pool,
detects arbitrage and sandwich opportunities, and reports the action each
strategy would take. Nothing is ever submitted to the network.

Usage:
    python main.py scan                          # One tick per strategy
    python main.py monitor                       # Scan until Ctrl+C
    python main.py monitor --strategy both       # Arbitrage and sandwich side by side
    python main.py monitor --mock                # Sample data, no node check
    python main.py monitor --feed-url wss://...  # Read snapshots from a websocket feed
"""

import argparse
import asyncio
import signal
import sys
from typing import List, Optional

from config.settings import Settings, get_settings
from config.strategy_params import ConfigurationError, ScanConfig, StrategyKind
from src.api import (
    FeedSnapshotSource,
    MockSnapshotSource,
    NodeCheckedSource,
    NodeRpcClient,
    RateLimiter,
    create_sample_prices,
    create_sample_transfers,
)
from src.api.source import BaseSnapshotSource
from src.execution import JsonLinesSink, LoggingSink
from src.scanner.scan_loop import CancellationToken, ScanLoop, run_scan_loops
from src.utils.logger import setup_logger

logger = setup_logger("mev_scanner", level="INFO")


class MevScanner:
    """Main scanner orchestrator."""

    def __init__(self, settings: Settings, configs: List[ScanConfig]):
        self.settings = settings
        self.configs = configs
        self.token = CancellationToken()
        self.sources: List[BaseSnapshotSource] = []
        self.loops: List[ScanLoop] = []

    def _build_source(self, use_mock: bool) -> BaseSnapshotSource:
        """Build one source per loop; loops never share a source handle."""
        if self.settings.feed_url:
            return FeedSnapshotSource(self.settings.feed_url)

        sample = MockSnapshotSource(
            prices=create_sample_prices(),
            transfers=create_sample_transfers(),
        )
        if use_mock:
            return sample

        rpc_client = NodeRpcClient(
            self.settings.rpc_url,
            rate_limiter=RateLimiter(self.settings.rpc_rate_limit),
        )
        return NodeCheckedSource(sample, rpc_client)

    async def initialize(self, use_mock: bool = False, plans_file: Optional[str] = None) -> None:
        """Initialize sources and loops."""
        logger.info(f"Initializing scanner for {', '.join(c.strategy.value for c in self.configs)}")

        sink = JsonLinesSink(plans_file) if plans_file else LoggingSink()

        for config in self.configs:
            source = self._build_source(use_mock)
            if isinstance(source, FeedSnapshotSource):
                try:
                    await source.run()
                except Exception as e:
                    logger.warning(f"Feed unavailable at startup ({e}), ticks will be skipped")
            self.sources.append(source)
            self.loops.append(ScanLoop(config, source, sink, token=self.token))

        logger.info("Scanner initialized successfully")

    def install_signal_handlers(self) -> None:
        """Cancel the scan on SIGINT/SIGTERM."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform; KeyboardInterrupt still ends the run
                pass

    def stop(self) -> None:
        if not self.token.cancelled:
            logger.info("Stop requested, finishing current tick...")
        self.token.cancel()

    async def scan_once(self) -> None:
        """Run a single tick per strategy."""
        for loop in self.loops:
            result = await loop.tick()
            if not result.ok:
                logger.info(f"[{loop.strategy_kind.value}] Tick skipped: {result.error}")

    async def monitor(self, max_ticks: Optional[int] = None) -> None:
        """Run all loops until cancelled."""
        for config in self.configs:
            logger.info(
                f"[{config.strategy.value}] threshold={config.threshold}%, "
                f"min_victim={config.min_victim_amount}, "
                f"min_profit={config.min_profit_threshold}, "
                f"interval={config.poll_interval_seconds}s"
            )
        await run_scan_loops(self.loops, max_ticks=max_ticks)

    async def cleanup(self) -> None:
        """Cleanup resources."""
        for source in self.sources:
            await source.close()


def build_configs(settings: Settings, args: argparse.Namespace) -> List[ScanConfig]:
    """Build one scan config per requested strategy."""
    if args.strategy == "both":
        kinds = [StrategyKind.ARBITRAGE, StrategyKind.SANDWICH]
    else:
        kinds = [StrategyKind(args.strategy or settings.strategy)]

    overrides = {
        "threshold": args.target_spread,
        "poll_interval_seconds": args.interval_ms / 1000.0 if args.interval_ms is not None else None,
    }
    return [ScanConfig.from_settings(settings, strategy=kind, **overrides) for kind in kinds]


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="MEV Opportunity Scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        "command",
        choices=["scan", "monitor"],
        help="Command to run"
    )
    parser.add_argument(
        "-s", "--strategy",
        choices=["arbitrage", "sandwich", "both"],
        help="Strategy to run (default: STRATEGY setting)"
    )
    parser.add_argument("-r", "--rpc-url", help="Node RPC URL")
    parser.add_argument("-t", "--target-spread", type=float, help="Arbitrage spread threshold in percent")
    parser.add_argument("-i", "--interval-ms", type=int, help="Polling interval in milliseconds")
    parser.add_argument("--feed-url", help="WebSocket feed URL for live snapshots")
    parser.add_argument("--mock", action="store_true", help="Use sample data without a node check")
    parser.add_argument("--max-ticks", type=int, help="Stop after this many ticks")
    parser.add_argument("--plans-file", help="Write plans as JSON lines instead of logging them")

    args = parser.parse_args()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    updates = {}
    if args.rpc_url:
        updates["rpc_url"] = args.rpc_url
    if args.feed_url:
        updates["feed_url"] = args.feed_url
    if updates:
        settings = settings.model_copy(update=updates)

    setup_logger("mev_scanner", log_file=settings.log_path, level=settings.log_level)

    try:
        configs = build_configs(settings, args)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    print(f"""
╔═══════════════════════════════════════════════════════════════╗
║               MEV Opportunity Scanner v0.1.0                  ║
║                                                               ║
║  Strategy: {(args.strategy or settings.strategy.value).upper():^12}                                       ║
║  RPC: {settings.rpc_url[:45]:^50}    ║
╚═══════════════════════════════════════════════════════════════╝
    """)

    scanner = MevScanner(settings, configs)

    try:
        await scanner.initialize(use_mock=args.mock, plans_file=args.plans_file)

        if args.command == "scan":
            await scanner.scan_once()

        elif args.command == "monitor":
            scanner.install_signal_handlers()
            await scanner.monitor(max_ticks=args.max_ticks)

    finally:
        await scanner.cleanup()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
