"""Per-client request rate limits.

Every route shares a global per-IP limit; ``/validate-address`` replaces it
with its own tighter per-second limit. Counters live in process memory.
"""

import math
import time
from typing import Optional

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

GLOBAL_RATE_LIMIT = "60/minute"
VALIDATE_RATE_LIMIT = "5/second"

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[GLOBAL_RATE_LIMIT],
    strategy="moving-window",
)


def install_rate_limiting(app: FastAPI) -> None:
    """Apply the global limit to every route of ``app``.

    Route-specific limits are declared with ``@limiter.limit`` and checked
    by the decorator itself.
    """
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)


def retry_after_ms(request: Request, exc: RateLimitExceeded) -> int:
    """Milliseconds until the exhausted limit admits another request."""
    current: Optional[tuple] = getattr(request.state, "view_rate_limit", None)
    if current is None:
        return exc.limit.limit.get_expiry() * 1000

    item, identifiers = current
    reset_at, _ = limiter.limiter.get_window_stats(item, *identifiers)
    return max(0, math.ceil((reset_at - time.time()) * 1000))
