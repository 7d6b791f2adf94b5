YEARN_VAULT_ABI = [
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "withdraw",
        "inputs": [
            {"name": "maxShares", "type": "uint256"},
            {"name": "recipient", "type": "address"},
            {"name": "maxLoss", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]
