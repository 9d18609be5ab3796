"""Shared addresses and amounts for tests.

All addresses are lowercase, matching how pools store them.

Usage:
    from tests.helpers import DAI, USDC, ALICE
    # or
    from tests.helpers.constants import DAI, USDC, ALICE
"""

# =============================================================================
# Basket assets
# =============================================================================

DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"  # 18 decimals
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"  # 6 decimals
USDT = "0xdac17f958d2ee523a2206206994597c13d831ec7"  # 6 decimals
SUSD = "0x57ab1ec28d129707052df4df418d58a2d46d5f51"  # 18 decimals

# Feeder asset
FRAX = "0x853d955acef822db058eb8505911ed77f175b99e"  # 18 decimals

TOKEN_DECIMALS = {DAI: 18, USDC: 6, USDT: 6, SUSD: 18, FRAX: 18}

# =============================================================================
# Pools and integrations
# =============================================================================

POOL = "0xe2f2a5c287993345a840db3b0845fbc70f5935a5"
FEEDER = "0x4e649d2b3d8dd9a9e93c5b9b6ab4d8d1d7f1a0c1"
INTEGRATION = "0x1111111111111111111111111111111111111111"
NEW_INTEGRATION = "0x2222222222222222222222222222222222222222"

# =============================================================================
# Accounts
# =============================================================================

GOVERNOR = "0x000000000000000000000000000000000000a0a0"
SAVINGS_MANAGER = "0x000000000000000000000000000000000000b0b0"
KEEPER = "0x000000000000000000000000000000000000c0c0"
ALICE = "0x000000000000000000000000000000000000a11c"
BOB = "0x0000000000000000000000000000000000000b0b"

# =============================================================================
# Amounts and time
# =============================================================================

ONE = 10**18
DAY = 24 * 60 * 60

# Arbitrary recent timestamp the test clock starts at
T0 = 1_700_000_000
