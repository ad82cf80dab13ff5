"""Action plan reporting."""

from src.execution.reporter import ExecutionReporter
from src.execution.sinks import CollectingSink, JsonLinesSink, LoggingSink, PlanSink, QueueSink

__all__ = [
    "CollectingSink",
    "ExecutionReporter",
    "JsonLinesSink",
    "LoggingSink",
    "PlanSink",
    "QueueSink",
]
