from decimal import Decimal

from executor.engine import ExecutionContext, ExecutorState
from executor.execution_report import StepSummary, build_step_summaries, format_run_report

EXPLORER = "https://sepolia.etherscan.io/tx/"


def _done_ctx() -> ExecutionContext:
    ctx = ExecutionContext(
        swap_amount=Decimal(1), leverage_multiplier=2, amount_in_raw=1_000_000
    )
    ctx.transition(ExecutorState.APPROVING)
    ctx.approve_tx_hash = "0xa1"
    ctx.transition(ExecutorState.LOOKING_UP_POOL)
    ctx.pool_address = "0xPool"
    ctx.pool_fee = 3000
    ctx.transition(ExecutorState.SWAPPING)
    ctx.swap_tx_hash = "0xb2"
    ctx.transition(ExecutorState.LEVERAGING)
    ctx.borrow_raw = 1_000_000
    ctx.leverage_tx_hash = "0xc3"
    ctx.transition(ExecutorState.DONE)
    ctx.finished_at = ctx.started_at + 1.5
    return ctx


def test_step_summary_line():
    line = StepSummary("swap", "CONFIRMED", "0xb2", EXPLORER).to_line()
    assert line == f"  SWAP: status=CONFIRMED | tx={EXPLORER}0xb2"


def test_skipped_step_has_no_tx():
    assert StepSummary("leverage").to_line() == "  LEVERAGE: status=SKIPPED"


def test_successful_run_report():
    text = format_run_report(_done_ctx(), EXPLORER)
    assert "swap_amount=1  leverage=2x" in text
    assert "amount_in_raw=1000000" in text
    assert "borrow_raw=1000000" in text
    assert "pool=0xPool  fee=3000" in text
    assert f"tx={EXPLORER}0xa1" in text
    assert f"tx={EXPLORER}0xc3" in text
    assert "Outcome: DONE" in text
    assert "Duration: 1500 ms" in text
    assert "Error" not in text


def test_failed_swap_marks_later_steps_skipped():
    ctx = ExecutionContext(swap_amount=Decimal(1), leverage_multiplier=2)
    ctx.transition(ExecutorState.APPROVING)
    ctx.approve_tx_hash = "0xa1"
    ctx.transition(ExecutorState.LOOKING_UP_POOL)
    ctx.transition(ExecutorState.SWAPPING)
    ctx.fail("swap", "Swap execution failed: reverted")

    statuses = {s.name: s.status for s in build_step_summaries(ctx)}
    assert statuses == {"approve": "CONFIRMED", "swap": "FAILED", "leverage": "SKIPPED"}

    text = format_run_report(ctx)
    assert "Outcome: FAILED" in text
    assert "Failed step: swap" in text
    assert "Error: Swap execution failed: reverted" in text


def test_pool_lookup_failure_leaves_swap_skipped():
    ctx = ExecutionContext(swap_amount=Decimal(1), leverage_multiplier=2)
    ctx.transition(ExecutorState.APPROVING)
    ctx.approve_tx_hash = "0xa1"
    ctx.transition(ExecutorState.LOOKING_UP_POOL)
    ctx.fail("pool_lookup", "Failed to get pool address")

    statuses = [s.status for s in build_step_summaries(ctx)]
    assert statuses == ["CONFIRMED", "SKIPPED", "SKIPPED"]
