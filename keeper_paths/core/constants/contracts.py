from keeper_paths.core.constants.chains import CHAIN_ID_ETHEREUM

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_TOKEN_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

# 0x exchange proxy; quoted calldata is sent here
ZRX_EXCHANGE_PROXY: dict[int, str] = {
    CHAIN_ID_ETHEREUM: "0xDef1C0ded9bec7F1a1670819833240f027b25EfF",
}

# --- Ethereum tokens ---
CRV = "0xD533a949740bb3306d119CC777fa900bA034cd52"
CVX = "0x4e3FBD56CD56c3e72c1403e103b45Db9da5B9D2B"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
THREE_CRV = "0x6c3F90f043a72FA612cbac8115EE7e52BDe6E490"
YVECRV = "0xc5bDdf9843308380375a611c18B50Fb9341f502A"
YVBOOST = "0x9d409a0A012CFbA9B15F6D4B36Ac57A46966Ab9a"

# --- Curve pools ---
CURVE_3POOL = "0xbEbc44782C7dB0a1A60Cb6fe97d0b483032FF1C7"
CURVE_SPELL_ETH_POOL = "0x98638FAcf9a3865cd033F36548713183f6996122"
CRV_SPELL_ETH = "0x8282BD15dcA2EA2bDf24163E8f2781B30C43A2ef"

# --- Strategies ---
STRATEGY_YVBOOST_3CRV = "0x91C3424A608439FBf3A91B6d954aF0577C1B9B8A"
STRATEGY_CONVEX_SPELL_ETH = "0xeDB4B647524FC2B9985019190551b197c6AB6C5c"

# --- yswaps multicall swappers ---
MULTICALL_SWAPPER_THREE_POOL = "0xceB202F25B50e8fAF212dE3CA6C53512C37a01D2"
MULTICALL_SWAPPER_SPELL_ETH = "0x7F036fa7B01E7c0286AFd4c7f756dd367E90a5f8"

# yswaps trade factory, overridable through config["yswaps"]["trade_factory"]
TRADE_FACTORY: dict[int, str] = {
    CHAIN_ID_ETHEREUM: "0x7BAF843e06095f68F4990Ca50161C2C4E4e01ec6",
}

# Strategies excluded from the detached harvest job run
HARVEST_DENY_LIST: tuple[str, ...] = (
    "0xB905eabA7A23424265638bdACFFE55564c7B299B",
    "0x56aF79e182a7f98ff6d0bF99d589ac2CabA24e2d",
    "0x85c307D24da7086c41537b994de9bFc4C21BAEB5",
    "0xBd3791F3Dcf9DD5633cd30662381C80a2Cd945bd",
    "0xbBdc83357287a29Aae30cCa520D4ed6C750a2a11",
    "0x4003eE222d44953B0C3eB61318dD211a4A6f109f",
    "0x36E74086C388305CEcdeff83d6cf31a2762A3c91",
    "0x1c13C43f8F2fa0CdDEE6DFF6F785757650B8c2BF",
    "0xfD7E0cCc4dE0E3022F47834d7f0122274c37a0d1",
    "0x8Bb79E595E1a21d160Ba3f7f6C94efF1484FB4c9",
)
