from .position import (
    LeverageParams,
    compute_borrow_amount,
    open_leveraged_position,
)

__all__ = ["LeverageParams", "compute_borrow_amount", "open_leveraged_position"]
