from eth_typing import BlockIdentifier, ChecksumAddress
from eth_utils import to_checksum_address
from web3.contract.async_contract import AsyncContractFunction

from ..models import TokenInfo
from ..utils import to_uint256
from ._abi import ERC20_ABI
from .contract import Contract


class ERC20(Contract):
    DEFAULT_ABI = ERC20_ABI

    async def info(self) -> TokenInfo:
        return TokenInfo(
            name=await self.functions.name().call(),
            symbol=await self.functions.symbol().call(),
            decimals=await self.functions.decimals().call(),
        )

    async def get_balance(
            self,
            address: ChecksumAddress | str,
            block_identifier: BlockIdentifier = "latest",
    ) -> int:
        return await self.functions.balanceOf(
            to_checksum_address(address)).call(block_identifier=block_identifier)

    async def allowance(
            self,
            owner: ChecksumAddress | str,
            spender: ChecksumAddress | str,
            block_identifier: BlockIdentifier = "latest",
    ) -> int:
        return await self.functions.allowance(
            to_checksum_address(owner),
            to_checksum_address(spender),
        ).call(block_identifier=block_identifier)

    def approve(self, spender: ChecksumAddress | str, amount: int) -> AsyncContractFunction:
        """
        approve(address spender, uint256 amount)
        """
        return self.functions.approve(to_checksum_address(spender), to_uint256(amount))
