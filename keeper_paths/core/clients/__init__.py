from keeper_paths.core.clients.ForkClient import ForkClient, ForkRpcError
from keeper_paths.core.clients.ZeroExClient import ZRX_CLIENT, Quote, ZeroExClient

__all__ = [
    "ForkClient",
    "ForkRpcError",
    "Quote",
    "ZRX_CLIENT",
    "ZeroExClient",
]
