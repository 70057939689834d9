from typing import Iterable

from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress, HexStr
from eth_utils import to_checksum_address
from web3.contract.async_contract import AsyncContractFunction
from web3.types import Wei

from ..disperser import DISPERSE_ADDRESS
from ..exceptions import ShapeMismatch
from ..utils import to_checksum_addresses, to_uint256, to_uint256s
from ._abi import DISPERSE_ABI
from .contract import Contract


def _encode_batch(
        recipients: Iterable[ChecksumAddress | str],
        amounts: Iterable[Wei | int],
) -> tuple[list[ChecksumAddress], list[Wei]]:
    recipients = to_checksum_addresses(recipients)
    amounts = to_uint256s(amounts)
    if len(recipients) != len(amounts):
        raise ShapeMismatch(len(recipients), len(amounts))
    return recipients, amounts


class Disperse(Contract):
    DEFAULT_ABI = DISPERSE_ABI
    DEFAULT_ADDRESS = DISPERSE_ADDRESS

    def send_native(
            self,
            recipients: Iterable[ChecksumAddress | str],
            amounts: Iterable[Wei | int],
    ) -> AsyncContractFunction:
        """
        sendNative(address[] recipients, uint256[] amounts) payable
        """
        return self.functions.sendNative(*_encode_batch(recipients, amounts))

    def send_token(
            self,
            token: ChecksumAddress | str,
            recipients: Iterable[ChecksumAddress | str],
            amounts: Iterable[int],
    ) -> AsyncContractFunction:
        """
        sendToken(address token, address[] recipients, uint256[] amounts)
        """
        return self.functions.sendToken(to_checksum_address(token), *_encode_batch(recipients, amounts))

    def rescue_token(self, token: ChecksumAddress | str) -> AsyncContractFunction:
        """
        rescueToken(address token)
        """
        return self.functions.rescueToken(to_checksum_address(token))

    def rescue_native(self) -> AsyncContractFunction:
        """
        rescueNative()
        """
        return self.functions.rescueNative()

    async def send_native_tx(
            self,
            account: LocalAccount,
            recipients: Iterable[ChecksumAddress | str],
            amounts: Iterable[Wei | int],
            value: Wei | int = None,
            **kwargs,
    ) -> HexStr:
        """
        Sign and submit `sendNative`.
        Attaches exactly `sum(amounts)` unless `value` is given; any surplus is refunded on-chain.
        """
        recipients, amounts = _encode_batch(recipients, amounts)
        fn = self.send_native(recipients, amounts)
        value = sum(amounts) if value is None else to_uint256(value)
        return await self.chain.execute_fn(account, fn, value=value, **kwargs)

    async def send_token_tx(
            self,
            account: LocalAccount,
            token: ChecksumAddress | str,
            recipients: Iterable[ChecksumAddress | str],
            amounts: Iterable[int],
            **kwargs,
    ) -> HexStr:
        """
        Sign and submit `sendToken`. The account must have approved this contract for `sum(amounts)`.
        """
        fn = self.send_token(token, recipients, amounts)
        return await self.chain.execute_fn(account, fn, **kwargs)
