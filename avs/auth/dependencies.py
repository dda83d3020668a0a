"""
FastAPI dependency for API token authentication.

Clients send the shared token in the ``X-Token`` header.
"""

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

_api_token: Optional[str] = None


def configure_api_token(token: Optional[str]) -> None:
    """Set the token expected in X-Token (called during app startup)."""
    global _api_token
    _api_token = token or None


async def require_api_token(
    x_token: Optional[str] = Header(None, alias="X-Token"),
) -> None:
    """
    Reject the request unless X-Token matches the configured token.

    Raises 401 when the header is missing or wrong, and also when no token
    has been configured at all.
    """
    if not _api_token or not x_token or not secrets.compare_digest(x_token.encode(), _api_token.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing X-Token header",
        )
