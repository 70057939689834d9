from typing import Iterable

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from web3.types import Wei

from ..exceptions import InvalidAddress, InvalidAmount

UINT256_MAX = 2 ** 256 - 1
ZERO_ADDRESS = to_checksum_address("0x" + "00" * 20)


def to_checksum_addresses(addresses: Iterable[str]) -> list[ChecksumAddress]:
    checksum_addresses = []
    for address in addresses:
        try:
            checksum_addresses.append(to_checksum_address(address))
        except (ValueError, TypeError) as e:
            raise InvalidAddress(f"Not an address: {address!r}") from e
    return checksum_addresses


def to_uint256(amount: int) -> Wei:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be an integer, got {amount!r}")
    if not 0 <= amount <= UINT256_MAX:
        raise InvalidAmount(f"Amount out of uint256 range: {amount}")
    return Wei(amount)


def to_uint256s(amounts: Iterable[int]) -> list[Wei]:
    return [to_uint256(amount) for amount in amounts]
