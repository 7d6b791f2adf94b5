from keeper_paths.core.constants.base import MAX_UINT256
from keeper_paths.core.constants.chains import SUPPORTED_CHAINS
from keeper_paths.core.constants.contracts import NATIVE_TOKEN_ADDRESS, ZERO_ADDRESS

__all__ = [
    "MAX_UINT256",
    "NATIVE_TOKEN_ADDRESS",
    "SUPPORTED_CHAINS",
    "ZERO_ADDRESS",
]
