from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from .exceptions import (
    InsufficientAllowance,
    InsufficientBalance,
    Revert,
    exception_from_revert,
)
from .gas import GasMeter
from .ledger import Ledger
from .models import TokenInfo
from .utils import UINT256_MAX, ZERO_ADDRESS


class ERC20:
    """
    Fungible token living on a `Ledger`.
    Balances and allowances are journaled, so token moves made inside an
    envelope are reverted together with everything else.
    """

    def __init__(
            self,
            ledger: Ledger,
            address: ChecksumAddress | str,
            info: TokenInfo = None,
    ):
        self.ledger = ledger
        self.address = to_checksum_address(address)
        self.info = info or TokenInfo(name="Token", symbol="TKN")
        self._balances: dict[ChecksumAddress, int] = {}
        self._allowances: dict[tuple[ChecksumAddress, ChecksumAddress], int] = {}
        self._total_supply: dict[str, int] = {"value": 0}
        ledger.deploy(self.address, self)

    def __str__(self):
        return self.address

    def __repr__(self):
        return f"{self.__class__.__name__}(address={self.address}, symbol={self.info.symbol})"

    @property
    def total_supply(self) -> int:
        return self._total_supply["value"]

    def balance_of(self, owner: ChecksumAddress) -> int:
        return self._balances.get(owner, 0)

    def allowance(self, owner: ChecksumAddress, spender: ChecksumAddress) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint(self, to: ChecksumAddress, amount: int):
        with self.ledger.frame():
            store = self.ledger.store
            store(self._balances, to, self.balance_of(to) + amount)
            store(self._total_supply, "value", self.total_supply + amount)

    def approve(self, owner: ChecksumAddress, spender: ChecksumAddress, amount: int) -> bool | None:
        with self.ledger.frame():
            self.ledger.store(self._allowances, (owner, spender), amount)
        return True

    def transfer(self, sender: ChecksumAddress, to: ChecksumAddress, amount: int) -> bool | None:
        with self.ledger.frame():
            self._transfer(sender, to, amount)
        return True

    def transfer_from(
            self,
            spender: ChecksumAddress,
            owner: ChecksumAddress,
            to: ChecksumAddress,
            amount: int,
    ) -> bool | None:
        with self.ledger.frame():
            self._spend_allowance(owner, spender, amount)
            self._transfer(owner, to, amount)
        return True

    def _transfer(self, sender: ChecksumAddress, to: ChecksumAddress, amount: int):
        if to == ZERO_ADDRESS:
            raise exception_from_revert("ERC20: transfer to the zero address")
        balance = self.balance_of(sender)
        if balance < amount:
            raise exception_from_revert("ERC20: transfer amount exceeds balance")
        store = self.ledger.store
        store(self._balances, sender, balance - amount)
        store(self._balances, to, self.balance_of(to) + amount)

    def _spend_allowance(self, owner: ChecksumAddress, spender: ChecksumAddress, amount: int):
        current = self.allowance(owner, spender)
        if current == UINT256_MAX:
            return
        if current < amount:
            raise exception_from_revert("ERC20: insufficient allowance")
        self.ledger.store(self._allowances, (owner, spender), current - amount)


class NoReturnERC20(ERC20):
    """Token whose transfer functions return nothing (USDT style)."""

    def approve(self, owner, spender, amount) -> None:
        super().approve(owner, spender, amount)

    def transfer(self, sender, to, amount) -> None:
        super().transfer(sender, to, amount)

    def transfer_from(self, spender, owner, to, amount) -> None:
        super().transfer_from(spender, owner, to, amount)


class FalseReturnERC20(ERC20):
    """Token that signals failed transfers with `False` instead of reverting."""

    def transfer(self, sender, to, amount) -> bool:
        try:
            return super().transfer(sender, to, amount)
        except (InsufficientBalance, InsufficientAllowance):
            return False

    def transfer_from(self, spender, owner, to, amount) -> bool:
        try:
            return super().transfer_from(spender, owner, to, amount)
        except (InsufficientBalance, InsufficientAllowance):
            return False


def _check_result(token: ERC20, result: bool | None):
    # `None` comes from tokens that return nothing
    if result is False:
        raise Revert(f"SafeERC20: {token.info.symbol} operation did not succeed")


def safe_transfer(
        token: ERC20,
        sender: ChecksumAddress,
        to: ChecksumAddress,
        amount: int,
        gas: GasMeter,
):
    gas.consume(token.ledger.gas_schedule.token_transfer)
    _check_result(token, token.transfer(sender, to, amount))


def safe_transfer_from(
        token: ERC20,
        spender: ChecksumAddress,
        owner: ChecksumAddress,
        to: ChecksumAddress,
        amount: int,
        gas: GasMeter,
):
    gas.consume(token.ledger.gas_schedule.token_transfer)
    _check_result(token, token.transfer_from(spender, owner, to, amount))
