"""
Failures raised by the execution steps.

Each error wraps the underlying RPC / contract failure (available as
``__cause__``) and names the step that failed.  The executor is the only
place that catches them.
"""

from __future__ import annotations


class StepError(Exception):
    """A step of the leveraged-swap run failed; later steps must not run."""

    step = "unknown"
    default_message = "Step failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ApprovalError(StepError):
    step = "approve"
    default_message = "Token approval failed"


class PoolNotFoundError(StepError):
    step = "pool_lookup"
    default_message = "Failed to get pool address"


class SwapExecutionError(StepError):
    step = "swap"
    default_message = "Swap execution failed"


class LeverageError(StepError):
    step = "leverage"
    default_message = "Leverage position failed"
