"""
AVS - US Address Validation Service
Run with: uvicorn main:app --port 3000

Validates free-form US addresses against the geocoding providers listed in
GEO_SERVICES and caches verified results in memory.
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
load_dotenv()  # Must be before importing config

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from avs.address_router import configure_router, install_exception_handlers, router as address_router
from avs.auth import configure_api_token
from avs.cache import AddressCache
from avs.config import Config
from avs.rate_limit import install_rate_limiting
from avs.services import create_address_validator

cfg = Config()  # Fresh instance after dotenv loaded

logging.basicConfig(
    level=logging.DEBUG if cfg.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Globals
_cache: AddressCache = None
_validator = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _cache, _validator

    print("\n" + "="*50)
    print("  AVS Startup")
    print("="*50 + "\n")

    # Missing credentials or unknown providers abort startup
    cfg.validate()

    _cache = AddressCache(max_size=cfg.cache_max_size, ttl=cfg.cache_ttl_ms / 1000)
    print(f"Cache: in-memory (max {cfg.cache_max_size} entries, TTL {cfg.cache_ttl_ms // 1000}s)")

    _validator = create_address_validator(cfg)
    print(f"Providers: {', '.join(cfg.geo_services)} (timeout {cfg.address_service_timeout_ms}ms)")

    configure_api_token(cfg.api_token)
    configure_router(_cache, _validator)

    print(f"\n  API: http://{cfg.host}:{cfg.port}")
    print(f"  Docs: http://{cfg.host}:{cfg.port}/docs\n")

    yield

    # Shutdown
    _cache.clear()
    await _validator.close()


app = FastAPI(title="Address Validation API", version="1.0.0", lifespan=lifespan)
app.include_router(address_router)
install_exception_handlers(app)
install_rate_limiting(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[cfg.api_domain],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Sanitized global exception handler - never exposes internal details."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "statusCode": 500,
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=cfg.host, port=cfg.port)
