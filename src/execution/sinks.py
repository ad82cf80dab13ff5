"""Destinations for emitted action plans."""

import asyncio
from pathlib import Path
from typing import Any, List, Optional, Protocol, Union

from src.models import ActionPlan
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.sinks")


class PlanSink(Protocol):
    """Anything that accepts plans; ``emit`` may be sync or async."""

    def emit(self, plan: ActionPlan) -> Any:
        ...


class LoggingSink:
    """Logs each plan with its legs."""

    def __init__(self, logger_name: str = "mev_scanner.plans") -> None:
        self._logger = get_logger(logger_name)

    def emit(self, plan: ActionPlan) -> None:
        self._logger.info(f"[{plan.strategy.value}] {plan.summary}")
        for i, leg in enumerate(plan.legs, 1):
            where = f" on {leg.venue}" if leg.venue else ""
            at = f" @ {leg.price:.2f}" if leg.price is not None else ""
            owner = "" if leg.ours else " (observed)"
            self._logger.info(
                f"  {i}. {leg.role.value}: {leg.side.value} {leg.amount:.4f} "
                f"{leg.instrument}{where}{at}{owner}"
            )
        for note in plan.notes:
            self._logger.debug(f"  note: {note}")


class CollectingSink:
    """Keeps every plan in memory."""

    def __init__(self) -> None:
        self.plans: List[ActionPlan] = []

    def emit(self, plan: ActionPlan) -> None:
        self.plans.append(plan)

    def clear(self) -> None:
        self.plans.clear()


class QueueSink:
    """Hands plans to a consumer through an asyncio queue."""

    def __init__(self, queue: Optional[asyncio.Queue] = None) -> None:
        self.queue: asyncio.Queue = queue if queue is not None else asyncio.Queue()

    async def emit(self, plan: ActionPlan) -> None:
        await self.queue.put(plan)


class JsonLinesSink:
    """Appends one JSON plan per line to a file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, plan: ActionPlan) -> None:
        with self._path.open("a", encoding="utf-8") as f:
            f.write(plan.to_json() + "\n")
