"""Pool error classes.

Every error aborts the operation with no partial mutation. The class
hierarchy is the stable classification callers and tests assert on:

- ValidationError: malformed input
- EconomicLimitError: weight limits and slippage bounds
- HealthGateError: basket is recollateralising
- NumericalError: invariant iteration failed
- AuthorizationError: caller lacks the required role
- ConfigurationError: governance parameter rejected
- SettlementError: nothing to settle
- IntegrationError: yield platform or asset transfer misbehaved
"""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


# =============================================================================
# Validation
# =============================================================================


class ValidationError(PoolError):
    """Input failed validation."""

    pass


class ZeroQuantityError(ValidationError):
    """Quantity must be positive."""

    def __init__(self, message: str = "Qty==0") -> None:
        super().__init__(message)


class InvalidAssetError(ValidationError):
    """Asset is not part of the basket."""

    def __init__(self, message: str = "Invalid asset") -> None:
        super().__init__(message)


class DuplicateAssetError(ValidationError):
    """The same asset appears twice in a multi-asset call."""

    def __init__(self, message: str = "Duplicate asset") -> None:
        super().__init__(message)


class InputArrayMismatchError(ValidationError):
    """Asset and quantity lists have different lengths."""

    def __init__(self, message: str = "Input array mismatch") -> None:
        super().__init__(message)


class InvalidRecipientError(ValidationError):
    """Recipient is null."""

    def __init__(self, message: str = "Invalid recipient") -> None:
        super().__init__(message)


class InvalidPairError(ValidationError):
    """Swap pair is not supported by this pool."""

    def __init__(self, message: str = "Invalid pair") -> None:
        super().__init__(message)


# =============================================================================
# Economic limits
# =============================================================================


class EconomicLimitError(PoolError):
    """Operation would breach an economic bound."""

    pass


class WeightLimitExceededError(EconomicLimitError):
    """Post-operation basket weight is outside [min, max]."""

    def __init__(self, message: str = "Exceeds weight limits") -> None:
        super().__init__(message)


class SlippageError(EconomicLimitError):
    """Output below the caller's minimum or burn above the caller's maximum."""

    pass


# =============================================================================
# Health gate
# =============================================================================


class HealthGateError(PoolError):
    """Basket health forbids the operation."""

    pass


class UnhealthyError(HealthGateError):
    def __init__(self, message: str = "Unhealthy") -> None:
        super().__init__(message)


class InRecollateralisationError(HealthGateError):
    def __init__(self, message: str = "In recol") -> None:
        super().__init__(message)


# =============================================================================
# Numerical
# =============================================================================


class NumericalError(PoolError):
    """Fatal, non-retryable failure of the invariant math."""

    pass


class InvariantDidNotConverge(NumericalError):
    """Newton iteration for the invariant D did not converge."""

    pass


class InsufficientLiquidityError(NumericalError):
    """No reserve balance satisfies the requested invariant."""

    pass


# =============================================================================
# Governance and settlement
# =============================================================================


class AuthorizationError(PoolError):
    """Caller is not allowed to perform the operation."""

    pass


class ConfigurationError(PoolError):
    """Governance parameter rejected."""

    pass


class ParameterOutOfBoundsError(ConfigurationError):
    pass


class RampError(ConfigurationError):
    """Amplification ramp request rejected."""

    pass


class RampTooShortError(RampError):
    def __init__(self, message: str = "Ramp time too short") -> None:
        super().__init__(message)


class RampTargetOutOfBoundsError(RampError):
    pass


class RampCooldownError(RampError):
    def __init__(
        self, message: str = "Sufficient period of previous ramp has not elapsed"
    ) -> None:
        super().__init__(message)


class RampNotActiveError(RampError):
    def __init__(self, message: str = "Amplification not changing") -> None:
        super().__init__(message)


class SettlementError(PoolError):
    """Surplus/deficit settlement had nothing to do."""

    pass


class IntegrationError(PoolError):
    """Yield platform or transfer accounting mismatch."""

    pass


class ReentrancyError(PoolError):
    """A mutating call re-entered the same pool."""

    def __init__(self, message: str = "Reentrant call") -> None:
        super().__init__(message)
