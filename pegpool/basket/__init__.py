"""Basket engine: invariant math, limits, fees, ramp and health.

Everything here is independent of token bookkeeping; pools combine these
pieces with a ledger, integrators and governance.
"""

from .amplification import AmplificationRamp
from .errors import (
    AuthorizationError,
    ConfigurationError,
    DuplicateAssetError,
    EconomicLimitError,
    HealthGateError,
    InputArrayMismatchError,
    InRecollateralisationError,
    InsufficientLiquidityError,
    IntegrationError,
    InvalidAssetError,
    InvalidPairError,
    InvalidRecipientError,
    InvariantDidNotConverge,
    NumericalError,
    ParameterOutOfBoundsError,
    PoolError,
    RampCooldownError,
    RampError,
    RampNotActiveError,
    RampTargetOutOfBoundsError,
    RampTooShortError,
    ReentrancyError,
    SettlementError,
    SlippageError,
    UnhealthyError,
    ValidationError,
    WeightLimitExceededError,
    ZeroQuantityError,
)
from .fees import FeeEngine
from .health import BasketHealthTracker
from .invariant import compute_invariant, compute_price, solve_invariant
from .logic import (
    compute_mint,
    compute_mint_multi,
    compute_redeem,
    compute_redeem_exact,
    compute_redeem_proportionately,
    compute_swap,
)
from .models import (
    AmpData,
    Asset,
    AssetReserve,
    AssetStatus,
    InvariantConfig,
    PoolData,
    WeightLimits,
)
from .weights import WeightLimitGuard

__all__ = [
    # Models
    "AmpData",
    "Asset",
    "AssetReserve",
    "AssetStatus",
    "InvariantConfig",
    "PoolData",
    "WeightLimits",
    # Components
    "AmplificationRamp",
    "BasketHealthTracker",
    "FeeEngine",
    "WeightLimitGuard",
    # Math
    "compute_invariant",
    "compute_price",
    "solve_invariant",
    "compute_mint",
    "compute_mint_multi",
    "compute_swap",
    "compute_redeem",
    "compute_redeem_exact",
    "compute_redeem_proportionately",
    # Errors
    "PoolError",
    "ValidationError",
    "ZeroQuantityError",
    "InvalidAssetError",
    "DuplicateAssetError",
    "InputArrayMismatchError",
    "InvalidRecipientError",
    "InvalidPairError",
    "EconomicLimitError",
    "WeightLimitExceededError",
    "SlippageError",
    "HealthGateError",
    "UnhealthyError",
    "InRecollateralisationError",
    "NumericalError",
    "InvariantDidNotConverge",
    "InsufficientLiquidityError",
    "AuthorizationError",
    "ConfigurationError",
    "ParameterOutOfBoundsError",
    "RampError",
    "RampTooShortError",
    "RampTargetOutOfBoundsError",
    "RampCooldownError",
    "RampNotActiveError",
    "SettlementError",
    "IntegrationError",
    "ReentrancyError",
]
