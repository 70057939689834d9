import pytest
from eth_utils import to_checksum_address

from better_disperse import Disperser, ERC20, Ledger, TokenInfo
from better_disperse.exceptions import Revert

STARTING_BALANCE = 1_000


def address(n: int) -> str:
    return to_checksum_address(f"0x{n:040x}")


PAYER = address(0xA11CE)
R1 = address(0x1001)
R2 = address(0x1002)
R3 = address(0x1003)
STRANGER = address(0x5EE)
TOKEN_ADDRESS = address(0x70CE)


class Rejecter:
    """Contract that refuses every incoming value."""

    def __init__(self, ledger: Ledger, at: str):
        self.address = at
        ledger.deploy(at, self)

    def receive(self, ledger, message):
        raise Revert("Rejecter: no thanks")


class GasBurner:
    def __init__(self, ledger: Ledger, at: str):
        self.address = at
        ledger.deploy(at, self)

    def receive(self, ledger, message):
        message.gas.consume(message.gas.remaining + 1)


class Bouncer:
    """Accepts value and sends half of it to `target` while still inside the call."""

    def __init__(self, ledger: Ledger, at: str, target: str):
        self.address = at
        self.target = target
        ledger.deploy(at, self)

    def receive(self, ledger, message):
        assert ledger.call(self.address, self.target, message.value // 2, message.gas)


@pytest.fixture
def ledger() -> Ledger:
    ledger = Ledger()
    ledger.mint(PAYER, STARTING_BALANCE)
    return ledger


@pytest.fixture
def disperser(ledger) -> Disperser:
    return Disperser(ledger)


@pytest.fixture
def token(ledger) -> ERC20:
    token = ERC20(ledger, TOKEN_ADDRESS, TokenInfo(name="Test Token", symbol="TST", decimals=6))
    token.mint(PAYER, STARTING_BALANCE)
    return token


def native_balances(ledger: Ledger, *addresses: str) -> list[int]:
    return [ledger.balance_of(a) for a in addresses]
