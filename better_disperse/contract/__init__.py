from .contract import Contract
from .disperse import Disperse
from .erc20 import ERC20

__all__ = [
    "Contract",
    "Disperse",
    "ERC20",
]
