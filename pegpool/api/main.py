"""FastAPI application for the pegpool quoting service.

No pool is built at import time. The first request that needs the registry
reads the JSON snapshot named by PEGPOOL_POOLS_FILE (see
pegpool.models.definitions), seeds every pool on one in-memory ledger and
keeps the result for the life of the process. Without the variable the
service starts with no pools and /pools returns an empty list.

Quote routes run the read-only get*Output mirrors, so serving traffic never
changes a loaded pool.
"""

import os

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from pegpool import __version__
from pegpool.api.endpoints import get_registry, router
from pegpool.registry import PoolRegistry

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("PEGPOOL_HOST", "0.0.0.0")
PORT = int(os.environ.get("PEGPOOL_PORT", "8000"))
DEBUG = os.environ.get("PEGPOOL_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="pegpool",
    description="Quotes for multi-asset value-pegged pools",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health(registry: PoolRegistry = Depends(get_registry)) -> dict[str, object]:
    """Health check; also reports how many pools the snapshot loaded."""
    return {"status": "ok", "version": __version__, "pools": len(registry)}


def run() -> None:
    """Run the quoting API server.

    Configuration via environment variables:
    - PEGPOOL_HOST: Host to bind to (default: 0.0.0.0)
    - PEGPOOL_PORT: Port to bind to (default: 8000)
    - PEGPOOL_DEBUG: Enable debug/reload mode (default: false)
    - PEGPOOL_POOLS_FILE: Pool snapshot loaded on first request (default: none)
    - PEGPOOL_SWAP_FEE, PEGPOOL_FEEDER_SWAP_FEE and the other setting variables
      read by pegpool.config.load_settings_from_env: defaults that snapshot
      entries override
    """
    uvicorn.run(
        "pegpool.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
