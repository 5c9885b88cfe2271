import asyncio

import pytest

from chain import abis
from chain.client import TransactionRevertedError, TxReceipt
from config import SWAP_ROUTER_ADDRESS
from core.base_types import Address
from core.errors import ApprovalError
from core.tokens import LINK, USDC
from exchange.approval import approve_token

ROUTER = Address.from_string(SWAP_ROUTER_ADDRESS)


def _run(coro):
    return asyncio.run(coro)


def test_approve_scales_amount_and_targets_router(chain, wallet):
    receipt = _run(approve_token(chain, USDC, ROUTER, 1, wallet))

    assert receipt.status
    (request,) = chain.sent
    assert request.to == USDC.address
    spender, amount = chain.decode_args(abis.ERC20["approve"], request)
    assert spender == ROUTER.checksum
    assert amount == 1_000_000


def test_approve_uses_the_tokens_own_decimals(chain, wallet):
    _run(approve_token(chain, LINK, ROUTER, "0.5", wallet))
    _, amount = chain.decode_args(abis.ERC20["approve"], chain.sent[0])
    assert amount == 5 * 10**17


def test_send_failure_wrapped(chain, wallet):
    chain.fail_send(USDC.address.checksum, ConnectionError("node down"))
    with pytest.raises(ApprovalError, match="Token approval failed") as info:
        _run(approve_token(chain, USDC, ROUTER, 1, wallet))
    assert isinstance(info.value.__cause__, ConnectionError)
    assert info.value.step == "approve"


def test_revert_wrapped(chain, wallet):
    receipt = TxReceipt(tx_hash="0xdead", status=False, block_number=1, gas_used=1)
    chain.fail_send(USDC.address.checksum, TransactionRevertedError(receipt))
    with pytest.raises(ApprovalError) as info:
        _run(approve_token(chain, USDC, ROUTER, 1, wallet))
    assert info.value.__cause__.tx_hash == "0xdead"


def test_unrepresentable_amount_fails_before_sending(chain, wallet):
    with pytest.raises(ApprovalError):
        _run(approve_token(chain, USDC, ROUTER, "0.0000001", wallet))
    assert chain.sent == []
