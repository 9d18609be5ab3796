"""Pytest configuration and fixtures."""

import pytest

from pegpool.clock import ManualClock
from pegpool.ledger import InMemoryLedger
from pegpool.pools import FeederPool, Pool
from tests.helpers import T0, make_feeder, make_pool, seed_feeder, seed_pool


@pytest.fixture
def clock() -> ManualClock:
    """Test clock starting at T0."""
    return ManualClock(T0)


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def pool(ledger: InMemoryLedger, clock: ManualClock) -> Pool:
    """Empty four-asset primary pool with default settings."""
    return make_pool(ledger=ledger, clock=clock)


@pytest.fixture
def seeded_pool(pool: Pool) -> Pool:
    """Primary pool holding 25 units of each asset, all minted by ALICE."""
    seed_pool(pool, 25)
    return pool


@pytest.fixture
def deep_pool(pool: Pool) -> Pool:
    """Primary pool holding 1000 units of each asset."""
    seed_pool(pool, 1000)
    return pool


@pytest.fixture
def feeder(deep_pool: Pool) -> FeederPool:
    """FRAX feeder holding 200 mAsset and 200 FRAX, nesting deep_pool."""
    feeder = make_feeder(deep_pool)
    seed_feeder(feeder, 200)
    return feeder
