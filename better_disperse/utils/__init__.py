from .eth import (
    UINT256_MAX,
    ZERO_ADDRESS,
    to_checksum_addresses,
    to_uint256,
    to_uint256s,
)
from .file import load_json


__all__ = [
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "to_checksum_addresses",
    "to_uint256",
    "to_uint256s",
    "load_json",
]
