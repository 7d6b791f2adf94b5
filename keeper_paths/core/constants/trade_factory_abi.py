_TRADE_COMPONENTS = [
    {"name": "_strategy", "type": "address"},
    {"name": "_tokenIn", "type": "address"},
    {"name": "_tokenOut", "type": "address"},
    {"name": "_amount", "type": "uint256"},
    {"name": "_minAmountOut", "type": "uint256"},
]

TRADE_FACTORY_ABI = [
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "execute",
        "inputs": [
            {
                "name": "_tradeExecutionDetails",
                "type": "tuple",
                "components": _TRADE_COMPONENTS,
            },
            {"name": "_swapper", "type": "address"},
            {"name": "_data", "type": "bytes"},
        ],
        "outputs": [{"name": "_receivedAmount", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "execute",
        "inputs": [
            {
                "name": "_tradesExecutionDetails",
                "type": "tuple[]",
                "components": _TRADE_COMPONENTS,
            },
            {"name": "_swapper", "type": "address"},
            {"name": "_data", "type": "bytes"},
        ],
        "outputs": [],
    },
]

EXECUTE_SINGLE_SIGNATURE = (
    "execute((address,address,address,uint256,uint256),address,bytes)"
)
EXECUTE_MULTIPLE_SIGNATURE = (
    "execute((address,address,address,uint256,uint256)[],address,bytes)"
)
