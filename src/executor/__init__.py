from .engine import (
    ExecutionContext,
    Executor,
    ExecutorConfig,
    ExecutorState,
    InvalidTransition,
    StateEvent,
)
from .execution_report import StepSummary, format_run_report

__all__ = [
    "Executor",
    "ExecutorConfig",
    "ExecutorState",
    "ExecutionContext",
    "InvalidTransition",
    "StateEvent",
    "StepSummary",
    "format_run_report",
]
