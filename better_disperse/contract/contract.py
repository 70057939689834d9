from typing import TYPE_CHECKING

from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address
from web3.contract.async_contract import AsyncContract, AsyncContractFunctions

if TYPE_CHECKING:
    from ..chain import Chain


class Contract:
    DEFAULT_ABI: ABI = None
    DEFAULT_ADDRESS: ChecksumAddress | str = None

    def __init__(self, chain: "Chain", address: ChecksumAddress | str = None, abi: ABI = None):
        address = address or self.DEFAULT_ADDRESS
        if address is None:
            raise ValueError(f"{self.__class__.__name__} needs an address")
        self._chain = chain
        self._contract: AsyncContract = chain.eth.contract(
            to_checksum_address(address), abi=abi or self.DEFAULT_ABI)

    def __str__(self):
        return self.address

    def __repr__(self):
        return f"{self.__class__.__name__}(address={self.address}, chain.name={self.chain.name})"

    @property
    def chain(self) -> "Chain":
        return self._chain

    @property
    def address(self) -> ChecksumAddress:
        return self._contract.address

    @property
    def abi(self) -> ABI:
        return self._contract.abi

    @property
    def functions(self) -> AsyncContractFunctions:
        return self._contract.functions
