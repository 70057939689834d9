from .chain import Chain
from .disperser import Disperser, DISPERSE_ADDRESS
from .enums import EntryPoint
from .ledger import Ledger, Message
from .models import GasSchedule, Leg, NativeCurrency, Receipt, TokenInfo
from .token import ERC20, FalseReturnERC20, NoReturnERC20


__all__ = [
    "Chain",
    "Disperser",
    "DISPERSE_ADDRESS",
    "EntryPoint",
    "Ledger",
    "Message",
    "GasSchedule",
    "Leg",
    "NativeCurrency",
    "Receipt",
    "TokenInfo",
    "ERC20",
    "FalseReturnERC20",
    "NoReturnERC20",
]
