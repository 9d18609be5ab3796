"""Request and response models for the quoting API.

Quotes are read-only: they run the same calculations as the mutating
pool operations against the loaded snapshot, without moving tokens.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from pegpool.models.types import Address, Amount


class MintQuoteRequest(BaseModel):
    asset: Address
    quantity: Amount


class MintMultiQuoteRequest(BaseModel):
    assets: list[Address] = Field(min_length=1)
    quantities: list[Amount] = Field(min_length=1)

    @model_validator(mode="after")
    def check_lengths(self) -> MintMultiQuoteRequest:
        if len(self.assets) != len(self.quantities):
            raise ValueError("assets and quantities must have the same length")
        return self


class SwapQuoteRequest(BaseModel):
    input_asset: Address = Field(alias="input")
    output_asset: Address = Field(alias="output")
    quantity: Amount

    model_config = {"populate_by_name": True}


class RedeemQuoteRequest(BaseModel):
    asset: Address
    quantity: Amount


class RedeemExactQuoteRequest(BaseModel):
    assets: list[Address] = Field(min_length=1)
    quantities: list[Amount] = Field(min_length=1)

    @model_validator(mode="after")
    def check_lengths(self) -> RedeemExactQuoteRequest:
        if len(self.assets) != len(self.quantities):
            raise ValueError("assets and quantities must have the same length")
        return self


class QuoteResponse(BaseModel):
    """Result of a quote.

    Mint, swap and redeem quotes set `output`; redeem-exact quotes set
    `burn`, the pool tokens that would be burned.
    """

    pool: Address
    output: Amount | None = None
    burn: Amount | None = None


class AssetState(BaseModel):
    address: Address
    ratio: Amount
    vault_balance: Amount = Field(alias="vaultBalance")
    status: str
    integrator: Address | None = None

    model_config = {"populate_by_name": True}


class PoolStateResponse(BaseModel):
    """Observable state of one loaded pool."""

    address: Address
    kind: str
    total_supply: Amount = Field(alias="totalSupply")
    surplus: Amount
    price: Amount
    k: Amount
    amplification: int
    swap_fee: Amount = Field(alias="swapFee")
    redemption_fee: Amount = Field(alias="redemptionFee")
    undergoing_recol: bool = Field(alias="undergoingRecol")
    assets: list[AssetState]

    model_config = {"populate_by_name": True}
