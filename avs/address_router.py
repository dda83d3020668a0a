"""FastAPI router for the address validation endpoint.

Requests are served through the process-wide ``AddressCache``; cache
misses call the configured validator (the orchestrator, or the single
provider adapter in a one-provider deployment).
"""

import logging
import math
from http import HTTPStatus
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from slowapi.errors import RateLimitExceeded

from avs.address_models import ValidateAddressResponse
from avs.auth import require_api_token
from avs.cache import AddressCache
from avs.errors import ServiceTimeoutError
from avs.rate_limit import VALIDATE_RATE_LIMIT, limiter, retry_after_ms


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Address Validation"])

# Set during app startup
_cache: AddressCache | None = None
_validator = None


def configure_router(cache: AddressCache, validator) -> None:
    """Configure the router with its dependencies.

    Args:
        cache: Process-wide result cache.
        validator: Object with ``async validate(address)``; an
            AddressServiceOrchestrator or a single AddressService.
    """
    global _cache, _validator
    _cache = cache
    _validator = validator
    logger.info(f"Address router configured (validator={type(validator).__name__})")


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "error": HTTPStatus(status_code).phrase,
            "message": message,
            **extra,
        },
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Render framework errors in the same body shape as endpoint errors."""

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request body")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return error_response(exc.status_code, str(exc.detail))

    # SlowAPIMiddleware calls this without awaiting it
    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        wait_ms = retry_after_ms(request, exc)
        seconds = math.ceil(wait_ms / 1000)
        logger.warning(f"Rate limit exceeded: {exc.detail}")
        response = error_response(
            429, f"Rate limit exceeded. Try again in {seconds} seconds", retryAfter=wait_ms
        )
        response.headers["Retry-After"] = str(seconds)
        return response


# ============================================================================
# Request Models
# ============================================================================


class ValidateAddressRequest(BaseModel):
    """Request model for address validation."""

    address: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Free-form US address",
        examples=["1600 Amphitheatre Parkway, Mountain View, CA"],
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/validate-address", dependencies=[Depends(require_api_token)])
@limiter.limit(VALIDATE_RATE_LIMIT)
async def validate_address(request: Request, body: ValidateAddressRequest) -> Any:
    """Validate and standardize a free-form US address.

    ``unverifiable`` is a normal 200 answer. A provider timeout maps to 503
    and any other failure to 502.
    """
    if _cache is None or _validator is None:
        raise HTTPException(status_code=503, detail="Address validation not configured")

    address = body.address

    async def fetch() -> ValidateAddressResponse:
        result = await _validator.validate(address)
        return ValidateAddressResponse(
            address=result.address,
            status=result.status,
            original_input=address,
            alt=getattr(result, "alt", None),
        )

    try:
        response = await _cache.get_or_fetch(address, fetch)
    except ServiceTimeoutError:
        return error_response(503, "Address service timeout")
    except Exception as e:
        logger.error(f"Address validation failed: {e}", exc_info=True)
        return error_response(502, "External service error")

    return response.to_dict()



def _provider_info() -> list[dict[str, Any]]:
    services = getattr(_validator, "services", None)
    if services is not None:
        return [service.get_info() for service in services.values()]
    if _validator is not None:
        return [_validator.get_info()]
    return []


@router.get("/health")
async def health() -> dict[str, Any]:
    """Service liveness plus provider, cache and orchestrator details."""
    providers = _provider_info()
    return {
        "status": "ok" if _validator is not None else "unconfigured",
        "services": [p["provider"] for p in providers],
        "providers": providers,
        "cache": _cache.stats() if _cache else None,
        "in_flight": getattr(_validator, "pending_count", 0),
    }
