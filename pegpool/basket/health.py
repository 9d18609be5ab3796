"""Basket health and recollateralisation tracking."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from .errors import InRecollateralisationError, UnhealthyError
from .models import Asset, AssetStatus

logger = structlog.get_logger()


class BasketHealthTracker:
    """Per-asset peg status and the basket-wide recol flag.

    The basket is undergoing recollateralisation while any asset is not
    Normal. Gates:
    - single-asset mint is refused while recollateralising
    - mintMulti and swap are refused when they touch a broken asset
    - every redemption is refused while recollateralising
    """

    def __init__(self, assets: list[Asset]) -> None:
        self.assets = assets

    @property
    def undergoing_recol(self) -> bool:
        return any(asset.status.is_broken for asset in self.assets)

    def handle_peg_loss(self, index: int, below_peg: bool) -> bool:
        """Mark an asset as broken. Returns False if it already had that status."""
        new_status = AssetStatus.BROKEN_BELOW_PEG if below_peg else AssetStatus.BROKEN_ABOVE_PEG
        asset = self.assets[index]
        if asset.status is new_status:
            return False
        asset.status = new_status
        logger.info("asset_status_changed", asset=asset.address, status=new_status.value)
        return True

    def negate_isolation(self, index: int) -> None:
        """Return an asset to Normal."""
        asset = self.assets[index]
        asset.status = AssetStatus.NORMAL
        logger.info("asset_status_changed", asset=asset.address, status=AssetStatus.NORMAL.value)

    def require_single_mint(self) -> None:
        if self.undergoing_recol:
            raise UnhealthyError()

    def require_touching_healthy(self, indices: Iterable[int]) -> None:
        for i in indices:
            if self.assets[i].status.is_broken:
                raise UnhealthyError()

    def require_redeem(self) -> None:
        if self.undergoing_recol:
            raise InRecollateralisationError()
