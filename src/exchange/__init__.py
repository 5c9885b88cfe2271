from .approval import approve_token
from .dex_swap import SwapParams, execute_swap, prepare_swap_params

__all__ = ["approve_token", "SwapParams", "prepare_swap_params", "execute_swap"]
