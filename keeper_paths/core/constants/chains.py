CHAIN_ID_ETHEREUM = 1
CHAIN_ID_FANTOM = 250

SUPPORTED_CHAINS = [
    CHAIN_ID_ETHEREUM,
    CHAIN_ID_FANTOM,
]

# Opera still prices gas with a plain gasPrice
PRE_EIP_1559_CHAIN_IDS: set[int] = {
    CHAIN_ID_FANTOM,
}

# Opera blocks carry more extraData than the 32 bytes web3 accepts by default
POA_MIDDLEWARE_CHAIN_IDS: set[int] = {
    CHAIN_ID_FANTOM,
}

CHAIN_EXPLORER_URLS: dict[int, str] = {
    CHAIN_ID_ETHEREUM: "https://etherscan.io/",
    CHAIN_ID_FANTOM: "https://ftmscan.com/",
}
