import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from better_disperse import Chain

from conftest import PAYER


class FakeEth:
    def __init__(self, block: dict):
        self.get_block = AsyncMock(return_value=block)
        self.get_transaction_count = AsyncMock(return_value=7)
        self.send_raw_transaction = AsyncMock(return_value=b"\xab\xcd")

    @property
    async def chain_id(self):
        return 1

    @property
    async def gas_price(self):
        return 50

    @property
    async def max_priority_fee(self):
        return 2


def make_chain(block: dict, **kwargs) -> Chain:
    chain = Chain("http://127.0.0.1:8545", name="local", **kwargs)
    chain.eth = FakeEth(block)
    return chain


def make_fn():
    fn = Mock()
    fn.estimate_gas = AsyncMock(return_value=90_000)
    fn.build_transaction = AsyncMock(side_effect=lambda tx_params: tx_params)
    return fn


LONDON_BLOCK = {"number": 1, "baseFeePerGas": 10}
LEGACY_BLOCK = {"number": 1}


def test_dynamic_fee_when_block_has_base_fee():
    chain, fn = make_chain(LONDON_BLOCK), make_fn()

    tx = asyncio.run(chain.build_tx(fn, PAYER))

    assert tx["maxFeePerGas"] == 50
    assert tx["maxPriorityFeePerGas"] == 2
    assert "gasPrice" not in tx
    assert tx["gas"] == 90_000
    assert tx["nonce"] == 7
    assert tx["chainId"] == 1
    assert tx["from"] == PAYER


def test_legacy_gas_price_when_block_has_no_base_fee():
    chain, fn = make_chain(LEGACY_BLOCK), make_fn()

    tx = asyncio.run(chain.build_tx(fn, PAYER))

    assert tx["gasPrice"] == 50
    assert "maxFeePerGas" not in tx


def test_default_gas_price_selects_legacy_pricing():
    chain, fn = make_chain(LONDON_BLOCK, gas_price=3), make_fn()

    tx = asyncio.run(chain.build_tx(fn, PAYER))

    assert tx["gasPrice"] == 3 * 10**9
    assert "maxFeePerGas" not in tx


def test_explicit_gas_skips_estimation():
    chain, fn = make_chain(LONDON_BLOCK), make_fn()

    tx = asyncio.run(chain.build_tx(fn, PAYER, gas=21_000, nonce=3, value=30))

    fn.estimate_gas.assert_not_awaited()
    chain.eth.get_transaction_count.assert_not_awaited()
    assert tx["gas"] == 21_000
    assert tx["nonce"] == 3
    assert tx["value"] == 30


@pytest.mark.parametrize("block, supported", [(LONDON_BLOCK, True), (LEGACY_BLOCK, False)])
def test_is_eip1559_supported(block, supported):
    chain = make_chain(block)

    assert asyncio.run(chain.is_eip1559_supported()) is supported


def test_sign_and_send_tx_sends_raw_transaction():
    chain = make_chain(LONDON_BLOCK)
    account = Mock()
    account.sign_transaction.return_value = SimpleNamespace(raw_transaction=b"\x01\x02")

    tx_hash = asyncio.run(chain.sign_and_send_tx(account, {"gas": 21_000}))

    chain.eth.send_raw_transaction.assert_awaited_once_with(b"\x01\x02")
    assert tx_hash == "0xabcd"
