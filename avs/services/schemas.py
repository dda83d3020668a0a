"""Pydantic models for the provider response payloads.

Only the fields the adapters read are declared; anything else in a
payload is ignored. A payload that does not match is treated as
unverifiable by the adapter that received it.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ============================================================================
# Google Geocoding API
# ============================================================================


class GoogleAddressComponent(BaseModel):
    long_name: str
    short_name: str
    types: list[str]


class GoogleLatLng(BaseModel):
    lat: float
    lng: float


class GoogleGeometry(BaseModel):
    location: GoogleLatLng
    location_type: str


class GoogleGeocodeResult(BaseModel):
    address_components: list[GoogleAddressComponent]
    formatted_address: str
    geometry: GoogleGeometry
    place_id: str
    types: list[str]
    partial_match: bool | None = None


class GoogleGeocodeResponse(BaseModel):
    results: list[GoogleGeocodeResult]
    status: Literal[
        "OK",
        "ZERO_RESULTS",
        "OVER_DAILY_LIMIT",
        "OVER_QUERY_LIMIT",
        "REQUEST_DENIED",
        "INVALID_REQUEST",
        "UNKNOWN_ERROR",
    ]
    error_message: str | None = None


# ============================================================================
# Geocodio
# ============================================================================


class GeocodioAddressComponents(BaseModel):
    number: str | None = None
    predirectional: str | None = None
    street: str | None = None
    suffix: str | None = None
    formatted_street: str | None = None
    city: str | None = None
    county: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None


class GeocodioLocation(BaseModel):
    lat: float
    lng: float


class GeocodioResult(BaseModel):
    address_components: GeocodioAddressComponents
    formatted_address: str
    location: GeocodioLocation
    accuracy: float
    accuracy_type: str
    source: str


class GeocodioInput(BaseModel):
    address_string: str
    formatted_address: str


class GeocodioResponse(BaseModel):
    input: GeocodioInput
    results: list[GeocodioResult]


# ============================================================================
# Azure Maps Search Address
# ============================================================================


class AzureMapsPosition(BaseModel):
    lat: float
    lon: float


class AzureMapsAddress(BaseModel):
    streetNumber: str | None = None
    streetName: str | None = None
    municipality: str | None = None
    countrySubdivision: str | None = None
    countrySubdivisionCode: str | None = None
    postalCode: str | None = None
    freeformAddress: str
    country: str
    countryCode: str


class AzureMapsResult(BaseModel):
    type: str
    score: float
    matchType: Literal["AddressPoint", "HouseNumberRange", "Street"] | None = None
    address: AzureMapsAddress
    position: AzureMapsPosition


class AzureMapsSummary(BaseModel):
    query: str
    queryType: str
    queryTime: float
    numResults: int
    fuzzyLevel: int | None = None


class AzureMapsResponse(BaseModel):
    summary: AzureMapsSummary
    results: list[AzureMapsResult]


# ============================================================================
# Google Address Validation API
# ============================================================================


class ValidationVerdict(BaseModel):
    inputGranularity: str | None = None
    validationGranularity: str | None = None
    geocodeGranularity: str | None = None
    addressComplete: bool | None = None
    hasUnconfirmedComponents: bool | None = None
    hasInferredComponents: bool | None = None
    hasReplacedComponents: bool | None = None


class PostalAddress(BaseModel):
    regionCode: str | None = None
    postalCode: str | None = None
    administrativeArea: str | None = None
    locality: str | None = None
    addressLines: list[str] | None = None


class ValidatedAddress(BaseModel):
    formattedAddress: str | None = None
    postalAddress: PostalAddress | None = None
    missingComponentTypes: list[str] | None = None
    unconfirmedComponentTypes: list[str] | None = None


class GeocodeLocation(BaseModel):
    latitude: float
    longitude: float


class Geocode(BaseModel):
    location: GeocodeLocation | None = None
    placeId: str | None = None


class UspsAddress(BaseModel):
    firstAddressLine: str | None = None
    secondAddressLine: str | None = None
    cityStateZipAddressLine: str | None = None
    city: str | None = None
    state: str | None = None
    zipCode: str | None = None
    zipCodeExtension: str | None = None


class UspsData(BaseModel):
    standardizedAddress: UspsAddress | None = None
    dpvConfirmation: str | None = None
    county: str | None = None


class AddressValidationResultPayload(BaseModel):
    verdict: ValidationVerdict | None = None
    address: ValidatedAddress | None = None
    geocode: Geocode | None = None
    uspsData: UspsData | None = None


class AddressValidationResponse(BaseModel):
    result: AddressValidationResultPayload | None = None
    responseId: str | None = Field(default=None)
