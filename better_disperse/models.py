from decimal import Decimal

from eth_typing import ChecksumAddress
from eth_utils import from_wei
from pydantic import BaseModel, Field
from web3.types import Wei

from .enums import EntryPoint


class NativeCurrency(BaseModel):
    name: str = "Ether"
    symbol: str = "ETH"
    decimals: int = 18

    def format(self, amount: Wei | int) -> str:
        return f"{from_wei(amount, 'ether')} {self.symbol}"


class TokenInfo(BaseModel):
    name: str
    symbol: str
    decimals: int = 18

    def format(self, amount: int) -> str:
        return f"{Decimal(amount).scaleb(-self.decimals).normalize():f} {self.symbol}"


class GasSchedule(BaseModel):
    """
    Execution cost of the ledger primitives.
    Values follow the post-Berlin EVM costs of the equivalent opcodes.
    """
    tx_base: int = 21_000
    call: int = 700
    call_value: int = 9_000
    new_account: int = 25_000
    call_stipend: int = 2_300
    token_transfer: int = 30_000


class Leg(BaseModel):
    recipient: ChecksumAddress
    amount: Wei

    model_config = {"frozen": True}


class Receipt(BaseModel):
    entry_point: EntryPoint
    caller: ChecksumAddress
    success: bool = True
    value: Wei = 0
    gas_used: int = 0
    token: ChecksumAddress | None = None
    legs: list[Leg] = Field(default_factory=list)
    refund: Wei = 0
    rescued: Wei = 0

    @property
    def total(self) -> int:
        return sum(leg.amount for leg in self.legs)

    @property
    def gas_per_leg(self) -> float:
        return self.gas_used / len(self.legs) if self.legs else float(self.gas_used)
