"""Feeder pool.

A two-asset pool whose first asset is the token of a primary Pool (the
"mAsset") and whose second is the feeder's own asset (the "fAsset").
Assets of the primary basket ("mpAssets") are accepted by mint, swap and
redeem: they are routed through the primary pool's public operations so
that the feeder only ever holds mAsset and fAsset.

Supported routes:
    mint:   mAsset | fAsset | mpAsset -> fpToken
    swap:   mAsset <-> fAsset, mpAsset <-> fAsset
    redeem: fpToken -> mAsset | fAsset | mpAsset

mpAsset <-> mAsset and mpAsset <-> mpAsset are not feeder routes.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from pegpool.basket.errors import (
    InvalidAssetError,
    InvalidPairError,
    SlippageError,
    ValidationError,
)
from pegpool.basket.logic import compute_mint, compute_redeem, compute_swap
from pegpool.clock import Clock
from pegpool.config import DEFAULT_FEEDER_SETTINGS, AssetConfig, PoolSettings
from pegpool.governance import AccessControl
from pegpool.integrations import PlatformIntegration
from pegpool.ledger import TokenLedger

from .pool import Pool, require_fully_received, require_quantity, require_recipient
from .results import MintResult, RedeemResult, SwapResult

logger = structlog.get_logger()

M_ASSET_INDEX = 0
F_ASSET_INDEX = 1


class FeederPool(Pool):
    """Two-asset pool nesting a primary pool token.

    Attributes:
        primary: The pool whose token is asset 0
    """

    def __init__(
        self,
        address: str,
        primary: Pool,
        f_asset: AssetConfig,
        ledger: TokenLedger,
        access: AccessControl,
        clock: Clock | None = None,
        settings: PoolSettings = DEFAULT_FEEDER_SETTINGS,
        integrations: Iterable[PlatformIntegration] = (),
    ) -> None:
        self.primary = primary
        super().__init__(
            address=address,
            assets=[AssetConfig(address=primary.address, decimals=18), f_asset],
            ledger=ledger,
            access=access,
            clock=clock or primary.clock,
            settings=settings,
            integrations=integrations,
        )

    def _participants(self) -> list[Any]:
        seen = {id(obj): obj for obj in super()._participants()}
        for obj in self.primary._participants():
            seen.setdefault(id(obj), obj)
        return list(seen.values())

    def _primary_index(self, asset: str) -> int | None:
        return self.primary._data.index_of(asset) if asset else None

    def _route(self, asset: str) -> tuple[int | None, int | None]:
        """(local index, primary basket index) of an asset; at most one is set."""
        local = self._data.index_of(asset) if asset else None
        if local is not None:
            return local, None
        mp = self._primary_index(asset)
        if mp is None:
            raise InvalidAssetError()
        return None, mp

    def _pull_mp_asset(self, sender: str, mp_index: int, asset: str, quantity: int) -> int:
        """Take an mpAsset from sender and mint mAsset with it; returns mAsset received."""
        received = self.ledger.transfer(asset, sender, self.address, quantity)
        require_fully_received(self.primary._data.assets[mp_index], quantity, received)
        return self.primary.mint(self.address, asset, received, 0, self.address).minted

    # =========================================================================
    # Mint
    # =========================================================================

    def get_mint_output(self, input_asset: str, input_quantity: int) -> int:
        require_quantity(input_quantity)
        local, _ = self._route(input_asset)
        if local is not None:
            return super().get_mint_output(input_asset, input_quantity)

        self._health().require_single_mint()
        m_quantity = self.primary.get_mint_output(input_asset, input_quantity)
        return compute_mint(
            self._data.reserves, M_ASSET_INDEX, m_quantity, self._invariant_config()
        )

    def mint(
        self,
        sender: str,
        input_asset: str,
        input_quantity: int,
        min_output_quantity: int,
        recipient: str,
    ) -> MintResult:
        require_recipient(recipient)
        require_quantity(input_quantity)
        local, mp = self._route(input_asset)
        if local is not None:
            return super().mint(sender, input_asset, input_quantity, min_output_quantity, recipient)

        with self._atomic():
            self._health().require_single_mint()
            m_quantity = self._pull_mp_asset(sender, mp, input_asset, input_quantity)
            minted = compute_mint(
                self._data.reserves, M_ASSET_INDEX, m_quantity, self._invariant_config()
            )
            if minted < min_output_quantity:
                raise SlippageError("Mint quantity < min qty")

            self._data.reserves[M_ASSET_INDEX].vault_balance += m_quantity
            self.ledger.mint(self.address, recipient, minted)

        logger.info(
            "feeder_minted_cross",
            pool=self.address,
            asset=input_asset.lower(),
            quantity=input_quantity,
            m_quantity=m_quantity,
            minted=minted,
        )
        return MintResult(
            minted=minted,
            assets=(input_asset.lower(),),
            quantities=(input_quantity,),
            recipient=recipient.lower(),
        )

    # =========================================================================
    # Swap
    # =========================================================================

    def _cross_pair(
        self, input_asset: str, output_asset: str
    ) -> tuple[int | None, int | None, int | None, int | None]:
        in_local, in_mp = self._route(input_asset)
        out_local, out_mp = self._route(output_asset)
        if in_mp is not None and out_local != F_ASSET_INDEX:
            raise InvalidPairError()
        if out_mp is not None and in_local != F_ASSET_INDEX:
            raise InvalidPairError()
        return in_local, in_mp, out_local, out_mp

    def get_swap_output(self, input_asset: str, output_asset: str, input_quantity: int) -> int:
        require_quantity(input_quantity)
        _, in_mp, _, out_mp = self._cross_pair(input_asset, output_asset)
        if in_mp is None and out_mp is None:
            return super().get_swap_output(input_asset, output_asset, input_quantity)

        self._health().require_touching_healthy([M_ASSET_INDEX, F_ASSET_INDEX])
        config = self._invariant_config()
        swap_fee = self._data.swap_fee
        if in_mp is not None:
            m_quantity = self.primary.get_mint_output(input_asset, input_quantity)
            output, _ = compute_swap(
                self._data.reserves, M_ASSET_INDEX, F_ASSET_INDEX, m_quantity, swap_fee, config
            )
            return output

        m_output, _ = compute_swap(
            self._data.reserves, F_ASSET_INDEX, M_ASSET_INDEX, input_quantity, swap_fee, config
        )
        return self.primary.get_redeem_output(output_asset, m_output)

    def swap(
        self,
        sender: str,
        input_asset: str,
        output_asset: str,
        input_quantity: int,
        min_output_quantity: int,
        recipient: str,
    ) -> SwapResult:
        require_recipient(recipient)
        require_quantity(input_quantity)
        _, in_mp, _, out_mp = self._cross_pair(input_asset, output_asset)
        if in_mp is None and out_mp is None:
            return super().swap(
                sender, input_asset, output_asset, input_quantity, min_output_quantity, recipient
            )

        with self._atomic():
            self._health().require_touching_healthy([M_ASSET_INDEX, F_ASSET_INDEX])
            max_cache = self._max_cache()
            reserves = self._data.reserves

            if in_mp is not None:
                m_quantity = self._pull_mp_asset(sender, in_mp, input_asset, input_quantity)
                output, fee = compute_swap(
                    reserves,
                    M_ASSET_INDEX,
                    F_ASSET_INDEX,
                    m_quantity,
                    self._data.swap_fee,
                    self._invariant_config(),
                )
                _check_output(output, min_output_quantity)
                reserves[M_ASSET_INDEX].vault_balance += m_quantity
                reserves[F_ASSET_INDEX].vault_balance -= output
                self._data.surplus += fee
                self._withdraw_tokens(F_ASSET_INDEX, output, recipient, max_cache)
            else:
                received = self._deposit_tokens(sender, F_ASSET_INDEX, input_quantity, max_cache)
                m_output, fee = compute_swap(
                    reserves,
                    F_ASSET_INDEX,
                    M_ASSET_INDEX,
                    received,
                    self._data.swap_fee,
                    self._invariant_config(),
                )
                reserves[F_ASSET_INDEX].vault_balance += received
                reserves[M_ASSET_INDEX].vault_balance -= m_output
                self._data.surplus += fee
                redeemed = self.primary.redeem(self.address, output_asset, m_output, 0, recipient)
                output = redeemed.output
                _check_output(output, min_output_quantity)

        logger.info(
            "feeder_swapped_cross",
            pool=self.address,
            input_asset=input_asset.lower(),
            output_asset=output_asset.lower(),
            input_quantity=input_quantity,
            output=output,
            fee=fee,
        )
        return SwapResult(
            input_asset=input_asset.lower(),
            output_asset=output_asset.lower(),
            input_quantity=input_quantity,
            output=output,
            scaled_fee=fee,
            recipient=recipient.lower(),
        )

    # =========================================================================
    # Redeem
    # =========================================================================

    def get_redeem_output(self, output_asset: str, pool_token_quantity: int) -> int:
        require_quantity(pool_token_quantity)
        local, _ = self._route(output_asset)
        if local is not None:
            return super().get_redeem_output(output_asset, pool_token_quantity)

        self._health().require_redeem()
        m_output, _ = compute_redeem(
            self._data.reserves,
            M_ASSET_INDEX,
            pool_token_quantity,
            self._data.swap_fee,
            self._invariant_config(),
        )
        return self.primary.get_redeem_output(output_asset, m_output)

    def redeem(
        self,
        sender: str,
        output_asset: str,
        pool_token_quantity: int,
        min_output_quantity: int,
        recipient: str,
    ) -> RedeemResult:
        require_recipient(recipient)
        require_quantity(pool_token_quantity)
        local, _ = self._route(output_asset)
        if local is not None:
            return super().redeem(
                sender, output_asset, pool_token_quantity, min_output_quantity, recipient
            )

        with self._atomic():
            self._health().require_redeem()
            m_output, fee = compute_redeem(
                self._data.reserves,
                M_ASSET_INDEX,
                pool_token_quantity,
                self._data.swap_fee,
                self._invariant_config(),
            )
            self.ledger.burn(self.address, sender, pool_token_quantity)
            self._data.surplus += fee
            self._data.reserves[M_ASSET_INDEX].vault_balance -= m_output
            output = self.primary.redeem(self.address, output_asset, m_output, 0, recipient).output
            if output < min_output_quantity:
                raise SlippageError("bAsset qty < min qty")

        logger.info(
            "feeder_redeemed_cross",
            pool=self.address,
            asset=output_asset.lower(),
            burned=pool_token_quantity,
            m_output=m_output,
            output=output,
            fee=fee,
        )
        return RedeemResult(
            output_asset=output_asset.lower(),
            burned=pool_token_quantity,
            output=output,
            scaled_fee=fee,
            recipient=recipient.lower(),
        )


def _check_output(output: int, minimum: int) -> None:
    if output == 0:
        raise ValidationError("Output == 0")
    if output < minimum:
        raise SlippageError("Output qty < minimum qty")
