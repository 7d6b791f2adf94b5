WETH_ABI = [
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "withdraw",
        "inputs": [{"name": "wad", "type": "uint256"}],
        "outputs": [],
    },
]
