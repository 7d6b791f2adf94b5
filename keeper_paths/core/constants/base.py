GAS_LIMIT_BUFFER_NUMERATOR = 110
GAS_LIMIT_BUFFER_DENOMINATOR = 100
SUGGESTED_PRIORITY_FEE_MULTIPLIER = 1.5
SUGGESTED_GAS_PRICE_MULTIPLIER = 1.5
MAX_BASE_FEE_GROWTH_MULTIPLIER = 2

# 0x quotes are requested with a fixed 10% slippage tolerance
DEFAULT_SLIPPAGE = 0.10

# seconds
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_TRANSACTION_TIMEOUT = 180

# Reward tokens dumped by a harvest stay "hot" for this long
REWARD_DUMPED_COOLDOWN_SECONDS = 150

MAX_UINT256 = 2**256 - 1

# Remainder left behind on the swapper when a leg would empty it
DUST_WEI = 1
