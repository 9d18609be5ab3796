"""Pydantic models describing pools to load into the quoting service.

A definition file is a JSON snapshot of observed pool state:

    {
      "pools": [
        {"kind": "primary", "address": "0x..", "settings": {"amplification": 100},
         "assets": [{"address": "0x..", "decimals": 6, "vaultBalance": "1000000"}],
         "totalSupply": "...", "surplus": "0"},
        {"kind": "feeder", "address": "0x..", "primary": "0x..",
         "mAssetVaultBalance": "...", "fAsset": {...}, "totalSupply": "..."}
      ]
    }

Feeder pools must be listed after the primary pool they nest.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Annotated, Literal

from pydantic import BaseModel, Discriminator, Field

from pegpool.basket.models import AssetStatus
from pegpool.config import (
    DEFAULT_FEEDER_SETTINGS,
    DEFAULT_POOL_SETTINGS,
    AssetConfig,
    PoolSettings,
)
from pegpool.models.types import Address, Amount


class SettingsDefinition(BaseModel):
    """Overrides of the default pool settings; unset fields keep defaults."""

    amplification: int | None = Field(default=None, gt=0)
    min_weight: Amount | None = Field(default=None, alias="minWeight")
    max_weight: Amount | None = Field(default=None, alias="maxWeight")
    swap_fee: Amount | None = Field(default=None, alias="swapFee")
    redemption_fee: Amount | None = Field(default=None, alias="redemptionFee")
    cache_size: Amount | None = Field(default=None, alias="cacheSize")
    recol_fee: Amount | None = Field(default=None, alias="recolFee")

    model_config = {"populate_by_name": True}

    def apply(self, base: PoolSettings) -> PoolSettings:
        overrides = {name: int(value) for name, value in self.model_dump(exclude_none=True).items()}
        return replace(base, **overrides)


class AssetDefinition(BaseModel):
    """One basket asset and its vault balance in native units."""

    address: Address
    decimals: int = Field(default=18, ge=0, le=26)
    vault_balance: Amount = Field(default="0", alias="vaultBalance")
    status: AssetStatus = AssetStatus.NORMAL
    has_tx_fee: bool = Field(default=False, alias="hasTxFee")

    model_config = {"populate_by_name": True}

    def to_config(self) -> AssetConfig:
        return AssetConfig(address=self.address, decimals=self.decimals, has_tx_fee=self.has_tx_fee)


class PrimaryPoolDefinition(BaseModel):
    kind: Literal["primary"] = "primary"
    address: Address
    assets: list[AssetDefinition] = Field(min_length=2)
    total_supply: Amount = Field(default="0", alias="totalSupply")
    surplus: Amount = "0"
    settings: SettingsDefinition = Field(default_factory=SettingsDefinition)

    model_config = {"populate_by_name": True}

    def pool_settings(self, base: PoolSettings = DEFAULT_POOL_SETTINGS) -> PoolSettings:
        return self.settings.apply(base)


class FeederPoolDefinition(BaseModel):
    kind: Literal["feeder"] = "feeder"
    address: Address
    primary: Address
    m_asset_vault_balance: Amount = Field(default="0", alias="mAssetVaultBalance")
    f_asset: AssetDefinition = Field(alias="fAsset")
    total_supply: Amount = Field(default="0", alias="totalSupply")
    surplus: Amount = "0"
    settings: SettingsDefinition = Field(default_factory=SettingsDefinition)

    model_config = {"populate_by_name": True}

    def pool_settings(self, base: PoolSettings = DEFAULT_FEEDER_SETTINGS) -> PoolSettings:
        return self.settings.apply(base)


PoolDefinition = Annotated[PrimaryPoolDefinition | FeederPoolDefinition, Discriminator("kind")]


class PoolSetDefinition(BaseModel):
    """Top-level definition file."""

    pools: list[PoolDefinition] = Field(default_factory=list)
