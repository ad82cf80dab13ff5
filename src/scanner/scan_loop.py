"""Polling loop driving the detect, rank and report pipeline."""

import asyncio
import inspect
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Sequence

from config.strategy_params import ConfigurationError, ScanConfig, StrategyKind
from src.api.source import MarketSnapshotSource, SourceError
from src.execution.reporter import ExecutionReporter
from src.execution.sinks import PlanSink
from src.models import ActionPlan
from src.scanner.ranker import rank
from src.scanner.strategy import ScanStrategy, build_strategy
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.scan_loop")


class ScanState(str, Enum):
    """Scan loop states."""
    IDLE = "idle"
    POLLING = "polling"
    EVALUATING = "evaluating"
    REPORTING = "reporting"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class CancellationToken:
    """Externally triggered stop signal shared by one or more loops."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


@dataclass
class TickResult:
    """Outcome of one poll, evaluate and report pass."""

    tick: int
    plans: List[ActionPlan] = field(default_factory=list)
    opportunities_found: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScanStats:
    """Running counters for a scan loop."""

    ticks: int = 0
    failed_polls: int = 0
    opportunities_found: int = 0
    plans_emitted: int = 0
    sink_errors: int = 0
    last_error: Optional[str] = None
    last_tick_at: Optional[datetime] = None


class ScanLoop:
    """
    Runs one strategy on a fixed cadence until cancelled.

    States: IDLE -> POLLING -> EVALUATING -> REPORTING -> SLEEPING -> POLLING ...
    A failed poll goes straight from POLLING to SLEEPING. STOPPED is reached
    only through the cancellation token and is terminal.
    """

    def __init__(
        self,
        config: ScanConfig,
        source: MarketSnapshotSource,
        sink: PlanSink,
        token: Optional[CancellationToken] = None,
        strategy: Optional[ScanStrategy] = None,
        reporter: Optional[ExecutionReporter] = None,
    ) -> None:
        """
        Initialize the scan loop.

        Args:
            config: Immutable scan configuration
            source: Snapshot source polled each tick
            sink: Receives every emitted plan
            token: Cancellation token (a private one is created if omitted)
            strategy: Strategy override (built from config if omitted)
            reporter: Reporter override (built from config if omitted)
        """
        if not isinstance(config, ScanConfig):
            raise ConfigurationError(
                f"ScanLoop needs a ScanConfig, got {type(config).__name__}"
            )

        self._config = config
        self._source = source
        self._sink = sink
        self._token = token or CancellationToken()
        self._strategy = strategy or build_strategy(config)
        self._reporter = reporter or ExecutionReporter(
            arbitrage_trade_size=config.arbitrage_trade_size
        )
        self._state = ScanState.IDLE
        self._stats = ScanStats()

    @property
    def config(self) -> ScanConfig:
        return self._config

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def stats(self) -> ScanStats:
        return self._stats

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def strategy_kind(self) -> StrategyKind:
        return self._strategy.kind

    def stop(self) -> None:
        """Request cancellation; takes effect at the next check point."""
        self._token.cancel()

    def _transition(self, state: ScanState) -> None:
        logger.debug(f"[{self.strategy_kind.value}] {self._state.value} -> {state.value}")
        self._state = state

    async def _poll(self) -> Sequence[Any]:
        try:
            snapshot = await asyncio.wait_for(
                self._strategy.poll(self._source),
                timeout=self._config.poll_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise SourceError(
                f"poll timed out after {self._config.poll_timeout_seconds}s"
            ) from e

        if not isinstance(snapshot, (list, tuple)):
            raise SourceError(f"malformed snapshot: expected a list, got {type(snapshot).__name__}")
        return snapshot

    async def _emit(self, plan: ActionPlan) -> bool:
        try:
            result = self._sink.emit(plan)
            if inspect.isawaitable(result):
                await result
            return True
        except Exception as e:
            self._stats.sink_errors += 1
            logger.error(f"Sink failed for {plan.instrument}: {e}")
            return False

    async def tick(self) -> TickResult:
        """
        Run one poll, evaluate and report pass.

        Leaves the loop in SLEEPING without sleeping, so callers can drive the
        loop tick by tick.

        Returns:
            TickResult with emitted plans or the poll error
        """
        if self._state == ScanState.STOPPED:
            raise RuntimeError("Scan loop is stopped")

        self._stats.ticks += 1
        self._stats.last_tick_at = datetime.now(timezone.utc)
        result = TickResult(tick=self._stats.ticks)
        kind = self.strategy_kind.value

        self._transition(ScanState.POLLING)
        try:
            snapshot = await self._poll()
        except SourceError as e:
            result.error = str(e)
        except Exception as e:
            logger.exception(f"[{kind}] Unexpected error from source")
            result.error = f"{type(e).__name__}: {e}"

        if result.error is not None:
            self._stats.failed_polls += 1
            self._stats.last_error = result.error
            logger.warning(f"[{kind}] Upstream unavailable ({result.error}), will retry")
            self._transition(ScanState.SLEEPING)
            return result

        self._transition(ScanState.EVALUATING)
        opportunities = self._strategy.detect(snapshot)
        result.opportunities_found = len(opportunities)
        self._stats.opportunities_found += len(opportunities)

        self._transition(ScanState.REPORTING)
        ranked = rank(
            opportunities,
            max_results=self._config.max_results,
            key=self._strategy.value_of,
        )

        if not ranked:
            logger.info(f"[{kind}] No opportunities this tick ({len(snapshot)} items scanned)")
        else:
            logger.info(f"[{kind}] Found {len(opportunities)} opportunities, reporting {len(ranked)}")

        for opportunity in ranked:
            plan = self._reporter.report(opportunity)
            result.plans.append(plan)
            if await self._emit(plan):
                self._stats.plans_emitted += 1

        self._transition(ScanState.SLEEPING)
        return result

    async def _sleep(self) -> None:
        """Sleep for the poll interval, waking immediately on cancellation."""
        try:
            await asyncio.wait_for(
                self._token.wait(),
                timeout=self._config.poll_interval_seconds,
            )
        except asyncio.TimeoutError:
            pass

    async def run(self, max_ticks: Optional[int] = None) -> ScanStats:
        """
        Run until the token is cancelled.

        Args:
            max_ticks: Stop after this many ticks (None runs until cancelled)

        Returns:
            Final loop statistics
        """
        if self._state == ScanState.STOPPED:
            raise RuntimeError("Scan loop is stopped")

        kind = self.strategy_kind.value
        logger.info(
            f"[{kind}] Scan loop starting: interval={self._config.poll_interval_seconds}s, "
            f"timeout={self._config.poll_timeout_seconds}s"
        )

        ticks_run = 0
        while True:
            if self._token.cancelled:
                break

            await self.tick()
            ticks_run += 1

            if max_ticks is not None and ticks_run >= max_ticks:
                break

            if self._token.cancelled:
                break
            await self._sleep()

        self._transition(ScanState.STOPPED)
        logger.info(
            f"[{kind}] Scan loop stopped after {self._stats.ticks} ticks "
            f"({self._stats.failed_polls} failed polls, {self._stats.plans_emitted} plans)"
        )
        return self._stats


async def run_scan_loops(loops: Sequence[ScanLoop], max_ticks: Optional[int] = None) -> List[ScanStats]:
    """
    Run independent scan loops concurrently.

    The loops share nothing but, typically, a cancellation token.
    """
    return list(await asyncio.gather(*(loop.run(max_ticks=max_ticks) for loop in loops)))
