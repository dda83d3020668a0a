"""
Address Provider Implementations.

Concrete adapters for the supported geocoding providers:
- Google Geocoding (google-maps)
- Geocodio (geocodio)
- Azure Maps (azure-maps)
- Google Address Validation (google-validation)

Each adapter owns its provider's status heuristics; the orchestrator only
sees the resulting ValidationResult.
"""

import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from avs.address_models import (
    GeoServiceName,
    StandardizedAddress,
    ValidationResult,
    ValidationStatus,
)

from .base import AddressService
from .schemas import (
    AddressValidationResponse,
    AddressValidationResultPayload,
    AzureMapsResponse,
    AzureMapsResult,
    GeocodioResponse,
    GeocodioResult,
    GoogleAddressComponent,
    GoogleGeocodeResponse,
    GoogleGeocodeResult,
)

logger = logging.getLogger(__name__)

# "123 Main St" / "123A Main St"
_ADDRESS_LINE = re.compile(r"^(\d+[A-Za-z]?)\s+(.+)$")


def split_address_line(line: str) -> tuple[Optional[str], str]:
    """Split a first address line into (number, street)."""
    match = _ADDRESS_LINE.match(line)
    if match:
        return match.group(1), match.group(2)
    return None, line


class GoogleMapsService(AddressService):
    """Google Geocoding API adapter."""

    name = GeoServiceName.GOOGLE_MAPS
    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    async def validate(self, address: str) -> ValidationResult:
        raw = await self._request(
            "GET",
            self.BASE_URL,
            params={"address": address, "key": self.api_key, "components": "country:US"},
        )
        return self._parse_response(raw)

    def _parse_response(self, raw_response: Any) -> ValidationResult:
        try:
            parsed = GoogleGeocodeResponse.model_validate(raw_response)
        except ValidationError:
            return ValidationResult.unverifiable(raw_response)

        if parsed.status != "OK" or not parsed.results:
            return ValidationResult.unverifiable(raw_response)

        best = parsed.results[0]
        address = self._extract_address(best)
        if address is None:
            return ValidationResult.unverifiable(raw_response)

        status = ValidationStatus.CORRECTED if best.partial_match else ValidationStatus.VALID
        return ValidationResult(address=address, status=status, raw_response=raw_response)

    @staticmethod
    def _extract_address(result: GoogleGeocodeResult) -> Optional[StandardizedAddress]:
        def find(component_type: str) -> Optional[GoogleAddressComponent]:
            return next(
                (c for c in result.address_components if component_type in c.types),
                None,
            )

        street_number = find("street_number")
        route = find("route")
        locality = find("locality")
        state = find("administrative_area_level_1")
        postal_code = find("postal_code")

        if not locality or not state or not postal_code:
            return None

        location = result.geometry.location
        return StandardizedAddress(
            street=route.long_name if route else "",
            number=street_number.long_name if street_number else None,
            city=locality.long_name,
            state=state.short_name,
            zip=postal_code.long_name,
            coordinates=(location.lat, location.lng),
        )


class GeocodioService(AddressService):
    """Geocodio adapter."""

    name = GeoServiceName.GEOCODIO
    BASE_URL = "https://api.geocod.io/v1.9/geocode"

    MIN_ACCURACY_FOR_VALID = 0.8
    HIGH_ACCURACY_TYPES = frozenset({"rooftop", "range_interpolation", "point"})

    async def validate(self, address: str) -> ValidationResult:
        raw = await self._request(
            "GET",
            self.BASE_URL,
            raise_for_status=True,
            params={"q": address, "api_key": self.api_key, "country": "US"},
        )
        return self._parse_response(raw)

    def _parse_response(self, raw_response: Any) -> ValidationResult:
        try:
            parsed = GeocodioResponse.model_validate(raw_response)
        except ValidationError:
            return ValidationResult.unverifiable(raw_response)

        if not parsed.results:
            return ValidationResult.unverifiable(raw_response)

        best = parsed.results[0]
        address = self._extract_address(best)
        if address is None:
            return ValidationResult.unverifiable(raw_response)

        return ValidationResult(
            address=address,
            status=self._determine_status(best),
            raw_response=raw_response,
        )

    def _determine_status(self, result: GeocodioResult) -> ValidationStatus:
        # accuracy is 0..1; only precise match types count as a clean hit
        if (
            result.accuracy >= self.MIN_ACCURACY_FOR_VALID
            and result.accuracy_type in self.HIGH_ACCURACY_TYPES
        ):
            return ValidationStatus.VALID
        return ValidationStatus.CORRECTED

    @staticmethod
    def _extract_address(result: GeocodioResult) -> Optional[StandardizedAddress]:
        components = result.address_components
        if not components.city or not components.state or not components.zip:
            return None

        return StandardizedAddress(
            street=components.formatted_street or components.street or "",
            number=components.number or None,
            city=components.city,
            state=components.state,
            zip=components.zip,
            coordinates=(result.location.lat, result.location.lng),
        )


class AzureMapsService(AddressService):
    """Azure Maps Search Address adapter."""

    name = GeoServiceName.AZURE_MAPS
    BASE_URL = "https://atlas.microsoft.com/search/address/json"

    MIN_SCORE_FOR_VALID = 8.0

    async def validate(self, address: str) -> ValidationResult:
        raw = await self._request(
            "GET",
            self.BASE_URL,
            params={
                "api-version": "1.0",
                "subscription-key": self.api_key,
                "query": address,
                "countrySet": "US",
                "limit": "1",
            },
        )
        return self._parse_response(raw)

    def _parse_response(self, raw_response: Any) -> ValidationResult:
        try:
            parsed = AzureMapsResponse.model_validate(raw_response)
        except ValidationError:
            return ValidationResult.unverifiable(raw_response)

        if not parsed.results:
            return ValidationResult.unverifiable(raw_response)

        best = parsed.results[0]
        address = self._extract_address(best)
        if address is None:
            return ValidationResult.unverifiable(raw_response)

        return ValidationResult(
            address=address,
            status=self._determine_status(best, parsed.summary.fuzzyLevel),
            raw_response=raw_response,
        )

    def _determine_status(self, result: AzureMapsResult, fuzzy_level: Optional[int]) -> ValidationStatus:
        if (
            result.matchType == "AddressPoint"
            and result.score >= self.MIN_SCORE_FOR_VALID
            and (not fuzzy_level or fuzzy_level == 1)
        ):
            return ValidationStatus.VALID
        return ValidationStatus.CORRECTED

    @staticmethod
    def _extract_address(result: AzureMapsResult) -> Optional[StandardizedAddress]:
        addr = result.address
        if not addr.municipality or not addr.countrySubdivisionCode or not addr.postalCode:
            return None

        return StandardizedAddress(
            street=addr.streetName or "",
            number=addr.streetNumber or None,
            city=addr.municipality,
            state=addr.countrySubdivisionCode,
            zip=addr.postalCode,
            coordinates=(result.position.lat, result.position.lon),
        )


class GoogleValidationService(AddressService):
    """Google Address Validation API adapter.

    Prefers the USPS standardized address (CASS data) when the API
    returns one.
    """

    name = GeoServiceName.GOOGLE_VALIDATION
    BASE_URL = "https://addressvalidation.googleapis.com/v1:validateAddress"

    async def validate(self, address: str) -> ValidationResult:
        raw = await self._request(
            "POST",
            self.BASE_URL,
            raise_for_status=True,
            params={"key": self.api_key},
            json={"address": {"regionCode": "US", "addressLines": [address]}},
        )
        return self._parse_response(raw)

    def _parse_response(self, raw_response: Any) -> ValidationResult:
        try:
            parsed = AddressValidationResponse.model_validate(raw_response)
        except ValidationError:
            return ValidationResult.unverifiable(raw_response)

        if parsed.result is None:
            return ValidationResult.unverifiable(raw_response)

        address = self._extract_address(parsed.result)
        status = self._determine_status(parsed.result)
        if address is None or status == ValidationStatus.UNVERIFIABLE:
            return ValidationResult.unverifiable(raw_response)

        return ValidationResult(address=address, status=status, raw_response=raw_response)

    @staticmethod
    def _determine_status(result: AddressValidationResultPayload) -> ValidationStatus:
        verdict = result.verdict
        if verdict is None:
            return ValidationStatus.UNVERIFIABLE

        if (
            verdict.addressComplete
            and not verdict.hasUnconfirmedComponents
            and not verdict.hasInferredComponents
            and not verdict.hasReplacedComponents
        ):
            return ValidationStatus.VALID

        if verdict.addressComplete or verdict.validationGranularity:
            return ValidationStatus.CORRECTED

        return ValidationStatus.UNVERIFIABLE

    @staticmethod
    def _extract_address(result: AddressValidationResultPayload) -> Optional[StandardizedAddress]:
        coordinates = None
        if result.geocode and result.geocode.location:
            loc = result.geocode.location
            if loc.latitude and loc.longitude:
                coordinates = (loc.latitude, loc.longitude)

        usps = result.uspsData.standardizedAddress if result.uspsData else None
        if usps is not None:
            if not usps.city or not usps.state or not usps.zipCode:
                return None
            number, street = split_address_line(usps.firstAddressLine or "")
            zip_code = (
                f"{usps.zipCode}-{usps.zipCodeExtension}" if usps.zipCodeExtension else usps.zipCode
            )
            return StandardizedAddress(
                street=street,
                number=number,
                city=usps.city,
                state=usps.state,
                zip=zip_code,
                coordinates=coordinates,
            )

        postal = result.address.postalAddress if result.address else None
        if postal is None:
            return None
        if not postal.locality or not postal.administrativeArea or not postal.postalCode:
            return None

        number, street = split_address_line((postal.addressLines or [""])[0])
        return StandardizedAddress(
            street=street,
            number=number,
            city=postal.locality,
            state=postal.administrativeArea,
            zip=postal.postalCode,
            coordinates=coordinates,
        )
