from typing import Union

from eth_typing import ChecksumAddress, HexStr

AddressLike = Union[ChecksumAddress, HexStr, str]
