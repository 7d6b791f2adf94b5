HARVEST_V2_DETACHED_JOB_ABI = [
    {
        "type": "function",
        "stateMutability": "view",
        "name": "strategies",
        "inputs": [],
        "outputs": [{"name": "_strategies", "type": "address[]"}],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "workable",
        "inputs": [{"name": "_strategy", "type": "address"}],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "lastWorkAt",
        "inputs": [{"name": "", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "work",
        "inputs": [{"name": "_strategy", "type": "address"}],
        "outputs": [],
    },
]
