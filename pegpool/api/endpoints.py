"""API endpoints for pool state and quotes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException

from pegpool.basket.errors import PoolError
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
from pegpool.pools.feeder import FeederPool
from pegpool.pools.pool import Pool
from pegpool.registry import PoolRegistry, UnknownPoolError, get_default_registry

logger = structlog.get_logger()

router = APIRouter(prefix="/pools")


def get_registry() -> PoolRegistry:
    """Dependency provider for the pool registry.

    Override this in tests to inject a prepared registry:
        app.dependency_overrides[get_registry] = lambda: registry
    """
    return get_default_registry()


def _lookup(registry: PoolRegistry, address: str) -> Pool:
    try:
        return registry.get(address)
    except UnknownPoolError:
        logger.warning("unknown_pool", pool=address)
        raise HTTPException(status_code=404, detail=f"Unknown pool {address}") from None


def _rejected(pool: Pool, operation: str, err: PoolError) -> HTTPException:
    logger.warning(
        "quote_rejected",
        pool=pool.address,
        operation=operation,
        error=type(err).__name__,
        reason=str(err),
    )
    return HTTPException(status_code=400, detail={"error": type(err).__name__, "reason": str(err)})


def _state(pool: Pool) -> PoolStateResponse:
    assets, reserves = pool.get_bassets()
    config = pool.get_config()
    price = pool.get_price()
    return PoolStateResponse(
        address=pool.address,
        kind="feeder" if isinstance(pool, FeederPool) else "primary",
        total_supply=str(pool.total_supply),
        surplus=str(pool.surplus),
        price=str(price.price),
        k=str(price.k),
        amplification=config.a,
        swap_fee=str(config.swap_fee),
        redemption_fee=str(config.redemption_fee),
        undergoing_recol=pool.undergoing_recol,
        assets=[
            AssetState(
                address=asset.address,
                ratio=str(reserve.ratio),
                vault_balance=str(reserve.vault_balance),
                status=asset.status.value,
                integrator=asset.integrator,
            )
            for asset, reserve in zip(assets, reserves)
        ],
    )


@router.get("")
async def list_pools(registry: PoolRegistry = Depends(get_registry)) -> list[PoolStateResponse]:
    """State of every loaded pool."""
    return [_state(pool) for pool in registry]


@router.get("/{address}")
async def get_pool(
    address: str, registry: PoolRegistry = Depends(get_registry)
) -> PoolStateResponse:
    return _state(_lookup(registry, address))


@router.post("/{address}/quote/mint", response_model_exclude_none=True)
async def quote_mint(
    address: str, request: MintQuoteRequest, registry: PoolRegistry = Depends(get_registry)
) -> QuoteResponse:
    pool = _lookup(registry, address)
    try:
        output = pool.get_mint_output(request.asset, int(request.quantity))
    except PoolError as err:
        raise _rejected(pool, "mint", err) from err
    return QuoteResponse(pool=pool.address, output=str(output))


@router.post("/{address}/quote/mint-multi", response_model_exclude_none=True)
async def quote_mint_multi(
    address: str, request: MintMultiQuoteRequest, registry: PoolRegistry = Depends(get_registry)
) -> QuoteResponse:
    pool = _lookup(registry, address)
    try:
        output = pool.get_mint_multi_output(request.assets, [int(q) for q in request.quantities])
    except PoolError as err:
        raise _rejected(pool, "mint_multi", err) from err
    return QuoteResponse(pool=pool.address, output=str(output))


@router.post("/{address}/quote/swap", response_model_exclude_none=True)
async def quote_swap(
    address: str, request: SwapQuoteRequest, registry: PoolRegistry = Depends(get_registry)
) -> QuoteResponse:
    pool = _lookup(registry, address)
    try:
        output = pool.get_swap_output(
            request.input_asset, request.output_asset, int(request.quantity)
        )
    except PoolError as err:
        raise _rejected(pool, "swap", err) from err
    return QuoteResponse(pool=pool.address, output=str(output))


@router.post("/{address}/quote/redeem", response_model_exclude_none=True)
async def quote_redeem(
    address: str, request: RedeemQuoteRequest, registry: PoolRegistry = Depends(get_registry)
) -> QuoteResponse:
    pool = _lookup(registry, address)
    try:
        output = pool.get_redeem_output(request.asset, int(request.quantity))
    except PoolError as err:
        raise _rejected(pool, "redeem", err) from err
    return QuoteResponse(pool=pool.address, output=str(output))


@router.post("/{address}/quote/redeem-exact", response_model_exclude_none=True)
async def quote_redeem_exact(
    address: str, request: RedeemExactQuoteRequest, registry: PoolRegistry = Depends(get_registry)
) -> QuoteResponse:
    pool = _lookup(registry, address)
    try:
        burn = pool.get_redeem_exact_bassets_output(
            request.assets, [int(q) for q in request.quantities]
        )
    except PoolError as err:
        raise _rejected(pool, "redeem_exact", err) from err
    return QuoteResponse(pool=pool.address, burn=str(burn))
