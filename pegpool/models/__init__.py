"""Pydantic models for pool definitions and the quoting API."""

from pegpool.models.definitions import (
    AssetDefinition,
    FeederPoolDefinition,
    PoolDefinition,
    PoolSetDefinition,
    PrimaryPoolDefinition,
    SettingsDefinition,
)
from pegpool.models.quotes import (
    AssetState,
    MintMultiQuoteRequest,
    MintQuoteRequest,
    PoolStateResponse,
    QuoteResponse,
    RedeemExactQuoteRequest,
    RedeemQuoteRequest,
    SwapQuoteRequest,
)
from pegpool.models.types import Address, Amount, normalize_address, validate_amount

__all__ = [
    "Address",
    "Amount",
    "AssetDefinition",
    "AssetState",
    "FeederPoolDefinition",
    "MintMultiQuoteRequest",
    "MintQuoteRequest",
    "PoolDefinition",
    "PoolSetDefinition",
    "PoolStateResponse",
    "PrimaryPoolDefinition",
    "QuoteResponse",
    "RedeemExactQuoteRequest",
    "RedeemQuoteRequest",
    "SettingsDefinition",
    "SwapQuoteRequest",
    "normalize_address",
    "validate_amount",
]
