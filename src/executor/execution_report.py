"""
Run report: one plain-text summary of a leveraged-swap run.

Each on-chain step (approve, swap, leverage) is rendered as a line with its
status and explorer link, followed by the overall outcome.  Printed by the
entry script once the run has finished, successful or not.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from executor.engine import ExecutionContext, ExecutorState

# Steps that mine a transaction, in run order, with the phase that runs them.
_TX_STEPS = (
    ("approve", ExecutorState.APPROVING, "approve_tx_hash"),
    ("swap", ExecutorState.SWAPPING, "swap_tx_hash"),
    ("leverage", ExecutorState.LEVERAGING, "leverage_tx_hash"),
)


@dataclass
class StepSummary:
    """One transaction-producing step in a uniform format."""

    name: str
    status: str = "SKIPPED"
    tx_hash: Optional[str] = None
    explorer_url: str = ""

    def to_line(self) -> str:
        parts = [f"  {self.name.upper()}: status={self.status}"]
        if self.tx_hash:
            parts.append(f"tx={self.explorer_url}{self.tx_hash}")
        return " | ".join(parts)


def _step_status(ctx: ExecutionContext, phase: ExecutorState, tx_hash) -> str:
    if tx_hash:
        return "CONFIRMED"
    if any(e.to_state == phase for e in ctx.events):
        return "FAILED"
    return "SKIPPED"


def build_step_summaries(ctx: ExecutionContext, explorer_url: str = "") -> list[StepSummary]:
    summaries = []
    for name, phase, attr in _TX_STEPS:
        tx_hash = getattr(ctx, attr)
        summaries.append(
            StepSummary(
                name=name,
                status=_step_status(ctx, phase, tx_hash),
                tx_hash=tx_hash,
                explorer_url=explorer_url,
            )
        )
    return summaries


def format_run_report(ctx: ExecutionContext, explorer_url: str = "") -> str:
    """Full report: inputs, pool, per-step status, outcome."""
    lines = [
        "━━ LEVERAGED SWAP REPORT ━━",
        f"  swap_amount={ctx.swap_amount}  leverage={ctx.leverage_multiplier}x",
    ]
    if ctx.amount_in_raw is not None:
        lines.append(f"  amount_in_raw={ctx.amount_in_raw}")
    if ctx.borrow_raw is not None:
        lines.append(f"  borrow_raw={ctx.borrow_raw}")
    if ctx.pool_address:
        lines.append(f"  pool={ctx.pool_address}  fee={ctx.pool_fee}")
    lines.append("")
    lines.append("Steps:")
    for summary in build_step_summaries(ctx, explorer_url):
        lines.append(summary.to_line())
    lines.append("")
    lines.append(f"Outcome: {ctx.state.name}")
    if ctx.error:
        lines.append(f"Failed step: {ctx.failed_step}")
        lines.append(f"Error: {ctx.error}")
    if ctx.duration_ms is not None:
        lines.append(f"Duration: {ctx.duration_ms:.0f} ms")
    lines.append("Phases: " + " → ".join(e.to_state.name for e in ctx.events))
    return "\n".join(lines)
