"""Primary basket pool.

A Pool holds N value-pegged assets behind a single pool token. Every
mutating operation follows the same path:

    validate -> health gate -> inbound transfers -> solver, weight limits
    and fees -> state mutation -> outbound transfers -> structured result

and runs inside an atomic scope: if anything raises, the pool, the ledger
and the integrators are restored to their state before the call.

Amounts are native token units except where a name says "scaled"; the
pool token always has 18 decimals.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import structlog

from pegpool.basket.amplification import AmplificationRamp
from pegpool.basket.errors import (
    DuplicateAssetError,
    InputArrayMismatchError,
    IntegrationError,
    InvalidAssetError,
    InvalidPairError,
    InvalidRecipientError,
    ParameterOutOfBoundsError,
    ReentrancyError,
    SettlementError,
    SlippageError,
    ValidationError,
    ZeroQuantityError,
)
from pegpool.basket.fees import FeeEngine, deficit_to_mint, surplus_to_burn, validate_cache_size
from pegpool.basket.health import BasketHealthTracker
from pegpool.basket.invariant import compute_invariant, compute_price
from pegpool.basket.logic import (
    compute_mint,
    compute_mint_multi,
    compute_redeem,
    compute_redeem_exact,
    compute_redeem_proportionately,
    compute_swap,
)
from pegpool.basket.models import (
    AmpData,
    Asset,
    AssetReserve,
    AssetStatus,
    InvariantConfig,
    PoolData,
)
from pegpool.basket.weights import WeightLimitGuard
from pegpool.clock import Clock, SystemClock
from pegpool.config import DEFAULT_POOL_SETTINGS, AssetConfig, PoolSettings
from pegpool.constants import A_PRECISION, MAX_A, RATIO_SCALE, SCALE, ZERO_ADDRESS
from pegpool.governance import (
    AccessControl,
    require_governor,
    require_governor_or_keeper,
    require_savings_manager,
)
from pegpool.integrations import PlatformIntegration
from pegpool.ledger import TokenLedger
from pegpool.math.fixed_point import ratio_for_decimals

from .results import (
    BassetView,
    MintResult,
    PoolConfigView,
    Price,
    RedeemExactResult,
    RedeemProportionateResult,
    RedeemResult,
    SwapResult,
)

logger = structlog.get_logger()


class Pool:
    """Primary pool over N base assets.

    Attributes:
        address: Pool token address; also the ledger account holding assets
            that have no integrator
        ledger: Token bookkeeping for assets and the pool token
        access: Role checks for admin operations
        clock: Time source for the ramp and the price cache
        integrations: Platform integrations by address
    """

    def __init__(
        self,
        address: str,
        assets: Sequence[AssetConfig],
        ledger: TokenLedger,
        access: AccessControl,
        clock: Clock | None = None,
        settings: PoolSettings = DEFAULT_POOL_SETTINGS,
        integrations: Iterable[PlatformIntegration] = (),
    ) -> None:
        if len(assets) < 2:
            raise ValidationError("Pool needs at least two assets")
        addresses = [a.address.lower() for a in assets]
        if len(set(addresses)) != len(addresses):
            raise DuplicateAssetError()
        if not 0 < settings.amplification < MAX_A:
            raise ParameterOutOfBoundsError("A out of bounds")

        self.address = address.lower()
        self.ledger = ledger
        self.access = access
        self.clock: Clock = clock or SystemClock()
        self.integrations: dict[str, PlatformIntegration] = {
            i.address.lower(): i for i in integrations
        }

        guard = WeightLimitGuard.validated(len(assets), settings.min_weight, settings.max_weight)
        fees = FeeEngine.validated(settings.swap_fee, settings.redemption_fee, settings.recol_fee)
        amp = settings.amplification * A_PRECISION

        self._data = PoolData(
            assets=[
                Asset(
                    address=a.address.lower(),
                    integrator=a.integrator.lower() if a.integrator else None,
                    has_tx_fee=a.has_tx_fee,
                )
                for a in assets
            ],
            reserves=[
                AssetReserve(ratio=ratio_for_decimals(a.decimals), vault_balance=0) for a in assets
            ],
            amp_data=AmpData(initial_a=amp, target_a=amp),
            weight_limits=guard.limits,
            recol_fee=fees.recol_fee,
            swap_fee=fees.swap_fee,
            redemption_fee=fees.redemption_fee,
            cache_size=validate_cache_size(settings.cache_size),
        )
        for asset in self._data.assets:
            if asset.integrator is not None and asset.integrator not in self.integrations:
                raise IntegrationError(f"Unknown integrator {asset.integrator} for {asset.address}")
        self._locked = False

    # =========================================================================
    # Atomic scope
    # =========================================================================

    def snapshot(self) -> PoolData:
        return copy.deepcopy(self._data)

    def restore(self, state: PoolData) -> None:
        self._data = copy.deepcopy(state)

    def _participants(self) -> list[Any]:
        """Stateful objects an operation may touch, deduplicated."""
        seen: dict[int, Any] = {}
        for obj in [self, self.ledger, *self.integrations.values()]:
            if hasattr(obj, "snapshot") and hasattr(obj, "restore"):
                seen.setdefault(id(obj), obj)
        return list(seen.values())

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        if self._locked:
            raise ReentrancyError()
        self._locked = True
        participants = self._participants()
        states = [(obj, obj.snapshot()) for obj in participants]
        try:
            yield
        except Exception:
            for obj, state in states:
                obj.restore(state)
            raise
        finally:
            self._locked = False
        self._data.cached_price_timestamp = None

    def import_state(
        self,
        vault_balances: Sequence[int],
        surplus: int = 0,
        statuses: Sequence[AssetStatus] | None = None,
    ) -> None:
        """Overwrite vault balances, surplus and asset statuses.

        Used to mirror an observed pool. Token balances on the ledger are
        the caller's responsibility.
        """
        if len(vault_balances) != len(self._data.assets):
            raise InputArrayMismatchError()
        if statuses is not None and len(statuses) != len(self._data.assets):
            raise InputArrayMismatchError()
        with self._atomic():
            for reserve, balance in zip(self._data.reserves, vault_balances):
                reserve.vault_balance = balance
            self._data.surplus = surplus
            if statuses is not None:
                for personal, status in zip(self._data.assets, statuses):
                    personal.status = AssetStatus(status)
                self._data.undergoing_recol = self._health().undergoing_recol
        logger.debug("pool_state_imported", pool=self.address, vault_balances=list(vault_balances))

    # =========================================================================
    # Views
    # =========================================================================

    @property
    def data(self) -> PoolData:
        """Copy of the complete pool state."""
        return self.snapshot()

    @property
    def total_supply(self) -> int:
        return self.ledger.total_supply(self.address)

    @property
    def surplus(self) -> int:
        return self._data.surplus

    @property
    def undergoing_recol(self) -> bool:
        return self._data.undergoing_recol

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(self.address, account)

    def get_a(self) -> int:
        """Current amplification, scaled by A_PRECISION."""
        return self._ramp().current_a(self.clock.now())

    def get_config(self) -> PoolConfigView:
        data = self._data
        return PoolConfigView(
            supply=self.total_supply + data.surplus,
            a=self.get_a(),
            limits=data.weight_limits,
            recol_fee=data.recol_fee,
            amp_data=copy.copy(data.amp_data),
            swap_fee=data.swap_fee,
            redemption_fee=data.redemption_fee,
            cache_size=data.cache_size,
        )

    def get_basset(self, asset: str) -> BassetView:
        index = self._index(asset)
        return BassetView(
            personal=copy.copy(self._data.assets[index]),
            reserve=copy.copy(self._data.reserves[index]),
        )

    def get_bassets(self) -> tuple[list[Asset], list[AssetReserve]]:
        return copy.deepcopy(self._data.assets), copy.deepcopy(self._data.reserves)

    def get_price(self) -> Price:
        """Pool-token price and invariant, cached per clock timestamp."""
        data = self._data
        now = self.clock.now()
        if data.cached_price_timestamp == now:
            return Price(price=data.cached_price, k=data.cached_k)
        supply = self.total_supply + data.surplus
        price, k = compute_price(data.scaled_reserves, self.get_a(), supply)
        data.cached_price, data.cached_k, data.cached_price_timestamp = price, k, now
        return Price(price=price, k=k)

    # =========================================================================
    # Read-only mirrors
    # =========================================================================

    def get_mint_output(self, input_asset: str, input_quantity: int) -> int:
        require_quantity(input_quantity)
        index = self._index(input_asset)
        self._health().require_single_mint()
        return compute_mint(self._data.reserves, index, input_quantity, self._invariant_config())

    def get_mint_multi_output(
        self, input_assets: Sequence[str], input_quantities: Sequence[int]
    ) -> int:
        indices = self._indices(input_assets, input_quantities)
        self._health().require_touching_healthy(indices)
        return compute_mint_multi(
            self._data.reserves, indices, list(input_quantities), self._invariant_config()
        )

    def get_swap_output(self, input_asset: str, output_asset: str, input_quantity: int) -> int:
        require_quantity(input_quantity)
        i, o = self._pair(input_asset, output_asset)
        self._health().require_touching_healthy([i, o])
        output, _ = compute_swap(
            self._data.reserves, i, o, input_quantity, self._data.swap_fee, self._invariant_config()
        )
        return output

    def get_redeem_output(self, output_asset: str, pool_token_quantity: int) -> int:
        require_quantity(pool_token_quantity)
        index = self._index(output_asset)
        self._health().require_redeem()
        output, _ = compute_redeem(
            self._data.reserves,
            index,
            pool_token_quantity,
            self._data.swap_fee,
            self._invariant_config(),
        )
        return output

    def get_redeem_exact_bassets_output(
        self, output_assets: Sequence[str], output_quantities: Sequence[int]
    ) -> int:
        indices = self._indices(output_assets, output_quantities)
        self._health().require_redeem()
        burned, _ = compute_redeem_exact(
            self._data.reserves,
            indices,
            list(output_quantities),
            self._data.swap_fee,
            self._invariant_config(),
        )
        return burned

    # =========================================================================
    # Mint
    # =========================================================================

    def mint(
        self,
        sender: str,
        input_asset: str,
        input_quantity: int,
        min_output_quantity: int,
        recipient: str,
    ) -> MintResult:
        """Deposit one asset and mint pool tokens to recipient.

        Raises:
            UnhealthyError: Basket is undergoing recollateralisation
            SlippageError: "Mint quantity < min qty"
        """
        require_recipient(recipient)
        require_quantity(input_quantity)
        index = self._index(input_asset)

        with self._atomic():
            self._health().require_single_mint()
            max_cache = self._max_cache()
            received = self._deposit_tokens(sender, index, input_quantity, max_cache)
            minted = compute_mint(self._data.reserves, index, received, self._invariant_config())
            if minted < min_output_quantity:
                raise SlippageError("Mint quantity < min qty")

            self._data.reserves[index].vault_balance += received
            self.ledger.mint(self.address, recipient, minted)

        asset = self._data.assets[index].address
        logger.info(
            "pool_minted",
            pool=self.address,
            asset=asset,
            quantity=received,
            minted=minted,
            recipient=recipient,
        )
        return MintResult(
            minted=minted, assets=(asset,), quantities=(received,), recipient=recipient.lower()
        )

    def mint_multi(
        self,
        sender: str,
        input_assets: Sequence[str],
        input_quantities: Sequence[int],
        min_output_quantity: int,
        recipient: str,
    ) -> MintResult:
        """Deposit several assets and mint pool tokens to recipient."""
        require_recipient(recipient)
        indices = self._indices(input_assets, input_quantities)

        with self._atomic():
            self._health().require_touching_healthy(indices)
            max_cache = self._max_cache()
            received = [
                self._deposit_tokens(sender, index, quantity, max_cache) if quantity > 0 else 0
                for index, quantity in zip(indices, input_quantities)
            ]
            minted = compute_mint_multi(
                self._data.reserves, indices, received, self._invariant_config()
            )
            if minted == 0:
                raise ValidationError("Zero mint quantity")
            if minted < min_output_quantity:
                raise SlippageError("Mint quantity < min qty")

            for index, quantity in zip(indices, received):
                self._data.reserves[index].vault_balance += quantity
            self.ledger.mint(self.address, recipient, minted)

        assets = tuple(self._data.assets[i].address for i in indices)
        logger.info(
            "pool_minted_multi",
            pool=self.address,
            assets=assets,
            quantities=received,
            minted=minted,
        )
        return MintResult(
            minted=minted, assets=assets, quantities=tuple(received), recipient=recipient.lower()
        )

    # =========================================================================
    # Swap
    # =========================================================================

    def swap(
        self,
        sender: str,
        input_asset: str,
        output_asset: str,
        input_quantity: int,
        min_output_quantity: int,
        recipient: str,
    ) -> SwapResult:
        """Exchange one basket asset for another.

        Raises:
            InvalidPairError: input and output are the same asset
            UnhealthyError: Either asset is not Normal
            SlippageError: "Output qty < minimum qty"
        """
        require_recipient(recipient)
        require_quantity(input_quantity)
        i, o = self._pair(input_asset, output_asset)

        with self._atomic():
            self._health().require_touching_healthy([i, o])
            max_cache = self._max_cache()
            received = self._deposit_tokens(sender, i, input_quantity, max_cache)
            output, fee = compute_swap(
                self._data.reserves, i, o, received, self._data.swap_fee, self._invariant_config()
            )
            if output == 0:
                raise ValidationError("Output == 0")
            if output < min_output_quantity:
                raise SlippageError("Output qty < minimum qty")

            self._data.reserves[i].vault_balance += received
            self._data.reserves[o].vault_balance -= output
            self._data.surplus += fee
            self._withdraw_tokens(o, output, recipient, max_cache)

        result = SwapResult(
            input_asset=self._data.assets[i].address,
            output_asset=self._data.assets[o].address,
            input_quantity=received,
            output=output,
            scaled_fee=fee,
            recipient=recipient.lower(),
        )
        logger.info(
            "pool_swapped",
            pool=self.address,
            input_asset=result.input_asset,
            output_asset=result.output_asset,
            input_quantity=received,
            output=output,
            fee=fee,
        )
        return result

    # =========================================================================
    # Redeem
    # =========================================================================

    def redeem(
        self,
        sender: str,
        output_asset: str,
        pool_token_quantity: int,
        min_output_quantity: int,
        recipient: str,
    ) -> RedeemResult:
        """Burn pool tokens for a single asset.

        Raises:
            InRecollateralisationError: Basket is undergoing recollateralisation
            SlippageError: "bAsset qty < min qty"
        """
        require_recipient(recipient)
        require_quantity(pool_token_quantity)
        index = self._index(output_asset)

        with self._atomic():
            self._health().require_redeem()
            max_cache = self._max_cache()
            output, fee = compute_redeem(
                self._data.reserves,
                index,
                pool_token_quantity,
                self._data.swap_fee,
                self._invariant_config(),
            )
            if output == 0:
                raise ValidationError("Output == 0")
            if output < min_output_quantity:
                raise SlippageError("bAsset qty < min qty")

            self.ledger.burn(self.address, sender, pool_token_quantity)
            self._data.surplus += fee
            self._data.reserves[index].vault_balance -= output
            self._withdraw_tokens(index, output, recipient, max_cache)

        asset = self._data.assets[index].address
        logger.info(
            "pool_redeemed",
            pool=self.address,
            asset=asset,
            burned=pool_token_quantity,
            output=output,
            fee=fee,
        )
        return RedeemResult(
            output_asset=asset,
            burned=pool_token_quantity,
            output=output,
            scaled_fee=fee,
            recipient=recipient.lower(),
        )

    def redeem_exact_bassets(
        self,
        sender: str,
        output_assets: Sequence[str],
        output_quantities: Sequence[int],
        max_pool_token_quantity: int,
        recipient: str,
    ) -> RedeemExactResult:
        """Burn as few pool tokens as needed to receive exact asset amounts.

        Raises:
            SlippageError: "Redeem pool token qty > max quantity"
        """
        require_recipient(recipient)
        indices = self._indices(output_assets, output_quantities)
        if sum(output_quantities) == 0:
            raise ZeroQuantityError()

        with self._atomic():
            self._health().require_redeem()
            max_cache = self._max_cache()
            burned, fee = compute_redeem_exact(
                self._data.reserves,
                indices,
                list(output_quantities),
                self._data.swap_fee,
                self._invariant_config(),
            )
            if burned > max_pool_token_quantity:
                raise SlippageError("Redeem pool token qty > max quantity")

            self.ledger.burn(self.address, sender, burned)
            self._data.surplus += fee
            for index, quantity in zip(indices, output_quantities):
                self._data.reserves[index].vault_balance -= quantity
            for index, quantity in zip(indices, output_quantities):
                self._withdraw_tokens(index, quantity, recipient, max_cache)

        assets = tuple(self._data.assets[i].address for i in indices)
        logger.info(
            "pool_redeemed_exact",
            pool=self.address,
            assets=assets,
            quantities=list(output_quantities),
            burned=burned,
            fee=fee,
        )
        return RedeemExactResult(
            assets=assets,
            quantities=tuple(output_quantities),
            burned=burned,
            scaled_fee=fee,
            recipient=recipient.lower(),
        )

    def redeem_proportionately(
        self,
        sender: str,
        pool_token_quantity: int,
        min_output_quantities: Sequence[int],
        recipient: str,
    ) -> RedeemProportionateResult:
        """Burn pool tokens for a pro-rata share of every asset."""
        require_recipient(recipient)
        require_quantity(pool_token_quantity)
        if len(min_output_quantities) != len(self._data.assets):
            raise InputArrayMismatchError()

        with self._atomic():
            self._health().require_redeem()
            max_cache = self._max_cache()
            outputs, fee = compute_redeem_proportionately(
                self._data.reserves,
                pool_token_quantity,
                self._data.redemption_fee,
                self._invariant_config(),
            )
            for output, minimum in zip(outputs, min_output_quantities):
                if output < minimum:
                    raise SlippageError("bAsset qty < min qty")

            self.ledger.burn(self.address, sender, pool_token_quantity)
            self._data.surplus += fee
            for index, output in enumerate(outputs):
                self._data.reserves[index].vault_balance -= output
            for index, output in enumerate(outputs):
                self._withdraw_tokens(index, output, recipient, max_cache)

        assets = tuple(a.address for a in self._data.assets)
        logger.info(
            "pool_redeemed_proportionately",
            pool=self.address,
            burned=pool_token_quantity,
            outputs=outputs,
            fee=fee,
        )
        return RedeemProportionateResult(
            assets=assets,
            outputs=tuple(outputs),
            burned=pool_token_quantity,
            scaled_fee=fee,
            recipient=recipient.lower(),
        )

    # =========================================================================
    # Governance
    # =========================================================================

    def set_weight_limits(self, caller: str, min_weight: int, max_weight: int) -> None:
        require_governor(self.access, caller)
        guard = WeightLimitGuard.validated(len(self._data.assets), min_weight, max_weight)
        with self._atomic():
            self._data.weight_limits = guard.limits
        logger.info(
            "weight_limits_changed", pool=self.address, min_weight=min_weight, max_weight=max_weight
        )

    def set_fees(self, caller: str, swap_fee: int, redemption_fee: int) -> None:
        require_governor(self.access, caller)
        fees = FeeEngine.validated(swap_fee, redemption_fee, self._data.recol_fee)
        with self._atomic():
            self._data.swap_fee = fees.swap_fee
            self._data.redemption_fee = fees.redemption_fee
        logger.info(
            "fees_changed", pool=self.address, swap_fee=swap_fee, redemption_fee=redemption_fee
        )

    def set_cache_size(self, caller: str, cache_size: int) -> None:
        require_governor(self.access, caller)
        validate_cache_size(cache_size)
        with self._atomic():
            self._data.cache_size = cache_size
        logger.info("cache_size_changed", pool=self.address, cache_size=cache_size)

    def set_transfer_fees_flag(self, caller: str, asset: str, flag: bool) -> None:
        """Mark an asset as charging transfer fees.

        Enabling the flag lends all of the integrator's idle cash, since
        fee assets are never held as cache.
        """
        require_governor(self.access, caller)
        index = self._index(asset)
        with self._atomic():
            personal = self._data.assets[index]
            personal.has_tx_fee = flag
            if flag and personal.integrator is not None:
                integration = self.integrations[personal.integrator]
                cash = self.ledger.balance_of(personal.address, integration.address)
                if cash > 0:
                    credited = integration.deposit(personal.address, cash, True)
                    self._data.reserves[index].vault_balance -= cash - credited
        logger.info("transfer_fee_flag_changed", pool=self.address, asset=asset.lower(), flag=flag)

    def start_ramp_a(self, caller: str, target_a: int, ramp_end_time: int) -> AmpData:
        require_governor(self.access, caller)
        with self._atomic():
            data = self._ramp().start_ramp(target_a, ramp_end_time, self.clock.now())
        return copy.copy(data)

    def stop_ramp_a(self, caller: str) -> AmpData:
        require_governor(self.access, caller)
        with self._atomic():
            data = self._ramp().stop_ramp(self.clock.now())
        return copy.copy(data)

    def handle_peg_loss(self, caller: str, asset: str, below_peg: bool) -> bool:
        """Isolate an asset that lost its peg. Returns False if nothing changed."""
        require_governor_or_keeper(self.access, caller)
        index = self._index(asset)
        with self._atomic():
            tracker = self._health()
            changed = tracker.handle_peg_loss(index, below_peg)
            self._data.undergoing_recol = tracker.undergoing_recol
        return changed

    def negate_isolation(self, caller: str, asset: str) -> None:
        require_governor(self.access, caller)
        index = self._index(asset)
        with self._atomic():
            tracker = self._health()
            tracker.negate_isolation(index)
            self._data.undergoing_recol = tracker.undergoing_recol

    def migrate_bassets(
        self, caller: str, assets: Sequence[str], new_integration: PlatformIntegration
    ) -> None:
        """Move every unit of the given assets to a new platform integration.

        Raises:
            IntegrationError: "Must migrate some bAssets", "Must transfer to
                new integrator" or "Must transfer full amount"
        """
        require_governor(self.access, caller)
        if len(assets) == 0:
            raise IntegrationError("Must migrate some bAssets")
        target = new_integration.address.lower()

        with self._atomic():
            for address in assets:
                index = self._index(address)
                personal = self._data.assets[index]
                if personal.integrator == target:
                    raise IntegrationError("Must transfer to new integrator")

                before = self.ledger.balance_of(personal.address, target)
                if personal.integrator is None:
                    balance = self.ledger.balance_of(personal.address, self.address)
                    self.ledger.transfer(personal.address, self.address, target, balance)
                else:
                    old = self.integrations[personal.integrator]
                    lent = old.check_balance(personal.address)
                    balance = lent + self.ledger.balance_of(personal.address, old.address)
                    old.withdraw(target, personal.address, balance, lent, False)

                if self.ledger.balance_of(personal.address, target) - before < balance:
                    raise IntegrationError("Must transfer full amount")
                personal.integrator = target
                logger.info(
                    "basset_migrated",
                    pool=self.address,
                    asset=personal.address,
                    integrator=target,
                    amount=balance,
                )
        self.integrations.setdefault(target, new_integration)

    def collect_interest(self, caller: str) -> tuple[int, int]:
        """Mint the accrued surplus to the savings manager.

        Returns:
            (minted, total supply after)
        """
        require_savings_manager(self.access, caller)
        with self._atomic():
            minted = self._data.surplus
            self._data.surplus = 0
            if minted > 0:
                self.ledger.mint(self.address, caller, minted)
        logger.info("interest_collected", pool=self.address, minted=minted)
        return minted, self.total_supply

    def collect_platform_interest(self, caller: str) -> tuple[int, list[int]]:
        """Mint pool tokens for interest earned on integrator platforms.

        Vault balances of Normal assets are raised to what their integrator
        actually holds; the resulting invariant growth is minted to the
        savings manager.

        Returns:
            (minted, per-asset gains in native units)
        """
        require_savings_manager(self.access, caller)
        with self._atomic():
            data = self._data
            a = self.get_a()
            k_before = compute_invariant(data.scaled_reserves, a)
            gains = [0] * len(data.assets)
            for index, personal in enumerate(data.assets):
                if personal.status is not AssetStatus.NORMAL or personal.integrator is None:
                    continue
                integration = self.integrations[personal.integrator]
                held = integration.check_balance(personal.address) + self.ledger.balance_of(
                    personal.address, integration.address
                )
                reserve = data.reserves[index]
                if held > reserve.vault_balance:
                    gains[index] = held - reserve.vault_balance
                    reserve.vault_balance = held

            k_after = compute_invariant(data.scaled_reserves, a)
            supply = self.total_supply + data.surplus
            minted = 0
            if k_before > 0 and k_after > k_before:
                minted = supply * (k_after - k_before) // k_before
            if minted == 0:
                raise SettlementError("Must collect something")
            self.ledger.mint(self.address, caller, minted)
        logger.info("platform_interest_collected", pool=self.address, minted=minted, gains=gains)
        return minted, gains

    def mint_deficit(self, caller: str) -> int:
        """Add k - (totalSupply + surplus) to surplus while over-collateralised."""
        require_governor(self.access, caller)
        with self._atomic():
            k = compute_invariant(self._data.scaled_reserves, self.get_a())
            deficit = deficit_to_mint(self.total_supply + self._data.surplus, k)
            self._data.surplus += deficit
        logger.info("deficit_minted", pool=self.address, amount=deficit)
        return deficit

    def burn_surplus(self, caller: str) -> int:
        """Burn (totalSupply + surplus) - k from the caller while under-collateralised."""
        with self._atomic():
            k = compute_invariant(self._data.scaled_reserves, self.get_a())
            excess = surplus_to_burn(self.total_supply + self._data.surplus, k)
            self.ledger.burn(self.address, caller, excess)
        logger.info("surplus_burned", pool=self.address, account=caller.lower(), amount=excess)
        return excess

    # =========================================================================
    # Internals
    # =========================================================================

    def _ramp(self) -> AmplificationRamp:
        return AmplificationRamp(self._data.amp_data)

    def _health(self) -> BasketHealthTracker:
        return BasketHealthTracker(self._data.assets)

    def _invariant_config(self) -> InvariantConfig:
        return InvariantConfig(
            supply=self.total_supply + self._data.surplus,
            a=self.get_a(),
            limits=self._data.weight_limits,
            recol_fee=self._data.recol_fee,
        )

    def _max_cache(self) -> int:
        return (self.total_supply + self._data.surplus) * self._data.cache_size // SCALE

    def _index(self, asset: str) -> int:
        index = self._data.index_of(asset) if asset else None
        if index is None:
            raise InvalidAssetError()
        return index

    def _indices(self, assets: Sequence[str], quantities: Sequence[int]) -> list[int]:
        if len(assets) == 0 or len(assets) != len(quantities):
            raise InputArrayMismatchError()
        indices = [self._index(a) for a in assets]
        if len(set(indices)) != len(indices):
            raise DuplicateAssetError()
        if any(q < 0 for q in quantities):
            raise ValidationError("Qty < 0")
        return indices

    def _pair(self, input_asset: str, output_asset: str) -> tuple[int, int]:
        i = self._index(input_asset)
        o = self._index(output_asset)
        if i == o:
            raise InvalidPairError()
        return i, o

    def _deposit_tokens(self, sender: str, index: int, quantity: int, max_cache: int) -> int:
        """Pull quantity from sender; returns what the basket actually received."""
        personal = self._data.assets[index]
        if personal.integrator is None:
            received = self.ledger.transfer(personal.address, sender, self.address, quantity)
            require_fully_received(personal, quantity, received)
            return received

        integration = self.integrations[personal.integrator]
        received = self.ledger.transfer(personal.address, sender, integration.address, quantity)
        require_fully_received(personal, quantity, received)
        if personal.has_tx_fee:
            deposited = integration.deposit(personal.address, received, True)
            return min(deposited, received)

        cash = self.ledger.balance_of(personal.address, integration.address)
        relative_max = max_cache * RATIO_SCALE // self._data.reserves[index].ratio
        if cash > relative_max:
            integration.deposit(personal.address, cash - relative_max // 2, False)
        return received

    def _withdraw_tokens(self, index: int, quantity: int, recipient: str, max_cache: int) -> None:
        """Send quantity to recipient, refilling the integrator cache when it runs dry."""
        if quantity == 0:
            return
        personal = self._data.assets[index]
        if personal.integrator is None:
            self.ledger.transfer(personal.address, self.address, recipient, quantity)
            return

        integration = self.integrations[personal.integrator]
        if personal.has_tx_fee:
            integration.withdraw(recipient, personal.address, quantity, quantity, True)
            return

        cash = self.ledger.balance_of(personal.address, integration.address)
        if quantity <= cash:
            integration.withdraw_raw(recipient, personal.address, quantity)
            return

        relative_mid = max_cache * RATIO_SCALE // self._data.reserves[index].ratio // 2
        total = min(relative_mid + quantity - cash, integration.check_balance(personal.address))
        integration.withdraw(recipient, personal.address, quantity, total, False)


def require_recipient(recipient: str | None) -> None:
    if not recipient or recipient.lower() == ZERO_ADDRESS:
        raise InvalidRecipientError()


def require_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ZeroQuantityError()


def require_fully_received(personal: Asset, quantity: int, received: int) -> None:
    if not personal.has_tx_fee and received < quantity:
        raise ValidationError("Asset not fully transferred")
