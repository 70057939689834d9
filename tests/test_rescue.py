import pytest

from better_disperse import EntryPoint, ERC20, NoReturnERC20
from better_disperse.exceptions import Revert

from conftest import PAYER, STRANGER, Rejecter, address


class FrozenToken(ERC20):
    """Refuses every transfer out."""

    def transfer(self, sender, to, amount):
        raise Revert("FrozenToken: transfers paused")


class RefusingToken(ERC20):
    def transfer(self, sender, to, amount):
        return False


def test_stranded_tokens_go_to_whoever_asks(disperser, token):
    token.transfer(PAYER, disperser.address, 25)

    receipt = disperser.rescue_token(STRANGER, token)

    assert token.balance_of(STRANGER) == 25
    assert disperser.token_balance(token) == 0
    assert receipt.entry_point is EntryPoint.RESCUE_TOKEN
    assert receipt.rescued == 25


def test_token_rescue_with_nothing_stranded_is_a_no_op(disperser, token):
    before = token.balance_of(PAYER)

    receipt = disperser.rescue_token(STRANGER, token)

    assert receipt.success
    assert receipt.rescued == 0
    assert token.balance_of(STRANGER) == 0
    assert token.balance_of(PAYER) == before


def test_token_rescue_is_idempotent(disperser, token):
    token.transfer(PAYER, disperser.address, 25)

    disperser.rescue_token(STRANGER, token)
    second = disperser.rescue_token(STRANGER, token)

    assert second.rescued == 0
    assert token.balance_of(STRANGER) == 25


def test_stranded_native_value_goes_to_whoever_asks(ledger, disperser):
    ledger.mint(disperser.address, 40)

    receipt = disperser.rescue_native(STRANGER)

    assert ledger.balance_of(STRANGER) == 40
    assert disperser.native_balance == 0
    assert receipt.entry_point is EntryPoint.RESCUE_NATIVE
    assert receipt.success
    assert receipt.rescued == 40


def test_plain_transfer_into_the_disperser_can_be_rescued(ledger, disperser):
    def transfer(msg):
        return ledger.call(PAYER, disperser.address, 15, msg.gas)

    assert ledger.execute(PAYER, PAYER, transfer)[0]
    assert disperser.native_balance == 15

    disperser.rescue_native(PAYER)

    assert disperser.native_balance == 0


def test_native_rescue_with_nothing_stranded_is_a_no_op(ledger, disperser):
    before = ledger.balance_of(PAYER)

    receipt = disperser.rescue_native(PAYER)

    assert receipt.success
    assert receipt.rescued == 0
    assert ledger.balance_of(PAYER) == before


def test_failed_native_rescue_does_not_fail_the_call(ledger, disperser, caplog):
    caller = Rejecter(ledger, address(0xBAD)).address
    ledger.mint(disperser.address, 40)

    receipt = disperser.rescue_native(caller)

    assert not receipt.success
    assert receipt.rescued == 0
    assert disperser.native_balance == 40
    assert ledger.balance_of(caller) == 0
    assert "Native rescue" in caplog.text


@pytest.mark.parametrize("token_class", [FrozenToken, RefusingToken])
def test_failed_token_rescue_fails_the_call(ledger, disperser, token_class):
    token = token_class(ledger, address(0x70CF))
    token.mint(disperser.address, 25)

    with pytest.raises(Revert):
        disperser.rescue_token(STRANGER, token)

    assert disperser.token_balance(token) == 25
    assert token.balance_of(STRANGER) == 0


def test_token_without_return_value_can_be_rescued(ledger, disperser):
    token = NoReturnERC20(ledger, address(0x70CF))
    token.mint(disperser.address, 25)

    receipt = disperser.rescue_token(STRANGER, token)

    assert receipt.rescued == 25
    assert token.balance_of(STRANGER) == 25
    assert disperser.token_balance(token) == 0
