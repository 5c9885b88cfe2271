"""Minimal interface fragments: only the methods the run touches."""

from .contract import ContractFunction

ERC20 = {
    "approve": ContractFunction("approve", ("address", "uint256"), ("bool",)),
}

UNISWAP_V3_FACTORY = {
    "getPool": ContractFunction("getPool", ("address", "address", "uint24"), ("address",)),
}

UNISWAP_V3_POOL = {
    "token0": ContractFunction("token0", (), ("address",)),
    "token1": ContractFunction("token1", (), ("address",)),
    "fee": ContractFunction("fee", (), ("uint24",)),
}

# SwapRouter02 layout: no deadline field in the struct.
EXACT_INPUT_SINGLE_PARAMS = "(address,address,uint24,address,uint256,uint256,uint160)"

SWAP_ROUTER = {
    "exactInputSingle": ContractFunction(
        "exactInputSingle", (EXACT_INPUT_SINGLE_PARAMS,), ("uint256",)
    ),
}

# (token, amount, borrow, minReceive, leverage)
LEVERAGE_PARAMS = "(address,uint256,uint256,uint256,uint256)"

LEVERAGE = {
    "leverage": ContractFunction("leverage", (LEVERAGE_PARAMS,), ()),
}
