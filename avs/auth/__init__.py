"""
AVS API token authentication.

A single shared token, configured through API_TOKEN, is required in the
X-Token header of every validation request.
"""

from .dependencies import (
    configure_api_token,
    require_api_token,
)

__all__ = [
    "configure_api_token",
    "require_api_token",
]
