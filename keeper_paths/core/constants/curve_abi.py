# Stable-swap pool (3pool): int128 coin index, no return value
CURVE_STABLE_POOL_ABI = [
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "remove_liquidity_one_coin",
        "inputs": [
            {"name": "_token_amount", "type": "uint256"},
            {"name": "i", "type": "int128"},
            {"name": "min_amount", "type": "uint256"},
        ],
        "outputs": [],
    },
]

# Crypto-swap pool with native ETH support (ETH/SPELL factory pool)
CURVE_CRYPTO_ETH_POOL_ABI = [
    {
        "type": "function",
        "stateMutability": "payable",
        "name": "add_liquidity",
        "inputs": [
            {"name": "amounts", "type": "uint256[2]"},
            {"name": "min_mint_amount", "type": "uint256"},
            {"name": "use_eth", "type": "bool"},
            {"name": "receiver", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]
