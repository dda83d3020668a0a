"""Comparison keys for addresses.

The same normalization is used for cache keys and for deduplicating
provider answers, so both must go through ``get_cache_key``.
"""

import re

from avs.address_models import StandardizedAddress

_WHITESPACE = re.compile(r"\s+")


def get_cache_key(value: str | None) -> str:
    """Lower-case, trim and collapse whitespace runs. None maps to ""."""
    return _WHITESPACE.sub(" ", (value or "").lower().strip())


def address_key(address: StandardizedAddress) -> str:
    """Deduplication key built from the postal components (no coordinates)."""
    return "|".join(
        get_cache_key(part)
        for part in (
            address.number,
            address.street,
            address.city,
            address.state,
            address.zip,
        )
    )
