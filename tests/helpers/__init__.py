"""Test helpers module for shared test utilities.

- constants: Asset and account addresses, amounts, the test clock start
- factories: Pool, feeder and funding factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    DAI,
    DAY,
    FEEDER,
    FRAX,
    GOVERNOR,
    INTEGRATION,
    KEEPER,
    NEW_INTEGRATION,
    ONE,
    POOL,
    SAVINGS_MANAGER,
    SUSD,
    T0,
    TOKEN_DECIMALS,
    USDC,
    USDT,
)
from tests.helpers.factories import (
    BASKET,
    fund,
    make_access,
    make_feeder,
    make_pool,
    make_pool_set_payload,
    seed_feeder,
    seed_pool,
    units,
)

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "DAI",
    "DAY",
    "FEEDER",
    "FRAX",
    "GOVERNOR",
    "INTEGRATION",
    "KEEPER",
    "NEW_INTEGRATION",
    "ONE",
    "POOL",
    "SAVINGS_MANAGER",
    "SUSD",
    "T0",
    "TOKEN_DECIMALS",
    "USDC",
    "USDT",
    # Factories
    "BASKET",
    "fund",
    "make_access",
    "make_feeder",
    "make_pool",
    "make_pool_set_payload",
    "seed_feeder",
    "seed_pool",
    "units",
]
