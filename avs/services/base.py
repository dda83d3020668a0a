"""
Base Address Service Interface.

Defines the adapter contract every geocoding provider implements: take a
free-form address, return a ``ValidationResult``. Business-level
non-matches come back as ``unverifiable``; only transport failures and
timeouts raise.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from avs.address_models import GeoServiceName, ValidationResult
from avs.errors import ServiceResponseError, ServiceTimeoutError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ServiceConfig:
    """Per-provider settings."""

    timeout: float  # seconds
    api_key: str


class AddressService(ABC):
    """
    Abstract base class for provider adapters.

    The orchestrator depends only on this interface.

    Implementations:
    - GoogleMapsService: Google Geocoding API
    - GeocodioService: Geocodio
    - AzureMapsService: Azure Maps Search Address
    - GoogleValidationService: Google Address Validation API (USPS CASS data)
    """

    name: GeoServiceName

    def __init__(self, config: ServiceConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.timeout = config.timeout
        self.api_key = config.api_key
        self._owns_client = http_client is None
        # No client-level timeout: _request enforces config.timeout itself
        self._http_client = http_client or httpx.AsyncClient(timeout=None)

    @abstractmethod
    async def validate(self, address: str) -> ValidationResult:
        """
        Validate a free-form address.

        Args:
            address: Address text as entered by the user

        Returns:
            ValidationResult; unverifiable when the provider had no usable match

        Raises:
            ServiceTimeoutError: Provider exceeded the configured timeout
            AddressServiceError / httpx.HTTPError: Transport failures
        """

    @abstractmethod
    def _parse_response(self, raw_response: Any) -> ValidationResult:
        """Translate a decoded provider payload into a ValidationResult."""

    async def _request(
        self,
        method: str,
        url: str,
        raise_for_status: bool = False,
        **kwargs,
    ) -> Any:
        """Send a request raced against the timeout and decode the JSON body."""
        try:
            response = await asyncio.wait_for(
                self._http_client.request(method, url, **kwargs),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"{self.name.value}: no response within {self.timeout}s")
            raise ServiceTimeoutError(service=self.name.value) from None

        if raise_for_status and not response.is_success:
            raise ServiceResponseError(
                response.status_code, response.reason_phrase, service=self.name.value
            )
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client:
            await self._http_client.aclose()

    def get_info(self) -> dict[str, Any]:
        """Get adapter info for debugging."""
        return {
            "provider": self.name.value,
            "timeout_seconds": self.timeout,
        }
