"""Factory functions for creating test pools.

Usage:
    from tests.helpers import make_pool, seed_pool

    pool = make_pool()
    seed_pool(pool, 25)  # 25 units of every asset from ALICE
"""

from collections.abc import Sequence

from pegpool.clock import ManualClock
from pegpool.config import DEFAULT_FEEDER_SETTINGS, DEFAULT_POOL_SETTINGS, AssetConfig, PoolSettings
from pegpool.governance import StaticAccessControl
from pegpool.integrations import PlatformIntegration
from pegpool.ledger import InMemoryLedger
from pegpool.pools import FeederPool, MintResult, Pool
from tests.helpers.constants import (
    ALICE,
    DAI,
    FEEDER,
    FRAX,
    GOVERNOR,
    KEEPER,
    POOL,
    SAVINGS_MANAGER,
    SUSD,
    T0,
    TOKEN_DECIMALS,
    USDC,
    USDT,
)

BASKET = (DAI, USDC, USDT, SUSD)


def units(amount: int, token: str = DAI) -> int:
    """Whole token units in native precision."""
    return amount * 10 ** TOKEN_DECIMALS.get(token, 18)


def make_access() -> StaticAccessControl:
    return StaticAccessControl(
        governor=GOVERNOR, savings_manager=SAVINGS_MANAGER, keepers=frozenset({KEEPER})
    )


def make_pool(
    ledger: InMemoryLedger | None = None,
    clock: ManualClock | None = None,
    settings: PoolSettings = DEFAULT_POOL_SETTINGS,
    assets: Sequence[AssetConfig] | None = None,
    integrations: Sequence[PlatformIntegration] = (),
) -> Pool:
    """Create an empty primary pool over DAI, USDC, USDT and sUSD.

    Args:
        ledger: Shared ledger (default: a fresh InMemoryLedger)
        clock: Test clock (default: ManualClock at T0)
        settings: Pool settings (default: DEFAULT_POOL_SETTINGS)
        assets: Asset configs (default: the four basket assets, no integrator)
        integrations: Platform integrations referenced by the assets
    """
    if assets is None:
        assets = [AssetConfig(address=a, decimals=TOKEN_DECIMALS[a]) for a in BASKET]
    return Pool(
        address=POOL,
        assets=assets,
        ledger=ledger or InMemoryLedger(),
        access=make_access(),
        clock=clock or ManualClock(T0),
        settings=settings,
        integrations=integrations,
    )


def fund(pool: Pool, account: str, token: str, amount: int) -> None:
    """Mint amount of a token to an account on the pool's ledger."""
    pool.ledger.mint(token, account, amount)


def seed_pool(pool: Pool, amount: int, account: str = ALICE) -> MintResult:
    """Fund account with amount whole units of every asset and mintMulti them."""
    assets = [a.address for a in pool.data.assets]
    quantities = [units(amount, a) for a in assets]
    for asset, quantity in zip(assets, quantities):
        fund(pool, account, asset, quantity)
    return pool.mint_multi(account, assets, quantities, 0, account)


def make_feeder(
    primary: Pool,
    settings: PoolSettings = DEFAULT_FEEDER_SETTINGS,
) -> FeederPool:
    """Create an empty FRAX feeder pool nesting primary on the same ledger."""
    return FeederPool(
        address=FEEDER,
        primary=primary,
        f_asset=AssetConfig(address=FRAX, decimals=18),
        ledger=primary.ledger,
        access=make_access(),
        clock=primary.clock,
        settings=settings,
    )


def seed_feeder(feeder: FeederPool, amount: int, account: str = ALICE) -> MintResult:
    """mintMulti amount whole units of mAsset and fAsset; account must hold the mAsset."""
    fund(feeder, account, FRAX, units(amount))
    return feeder.mint_multi(
        account, [feeder.primary.address, FRAX], [units(amount), units(amount)], 0, account
    )


def make_pool_set_payload(amount: int = 1000) -> dict:
    """JSON-style definition of a primary pool and a FRAX feeder nesting it."""
    return {
        "pools": [
            {
                "kind": "primary",
                "address": POOL,
                "assets": [
                    {
                        "address": asset,
                        "decimals": TOKEN_DECIMALS[asset],
                        "vaultBalance": str(units(amount, asset)),
                    }
                    for asset in BASKET
                ],
                "totalSupply": str(units(4 * amount)),
            },
            {
                "kind": "feeder",
                "address": FEEDER,
                "primary": POOL,
                "mAssetVaultBalance": str(units(amount // 2)),
                "fAsset": {"address": FRAX, "vaultBalance": str(units(amount // 2))},
                "totalSupply": str(units(amount)),
            },
        ]
    }
