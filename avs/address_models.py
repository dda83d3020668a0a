"""Address validation data models and enums.

This module defines the data structures shared by the provider adapters,
the validation orchestrator and the result cache.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ValidationStatus(str, Enum):
    """Confidence classification of a validation result."""

    VALID = "valid"                 # Provider matched the address as given
    CORRECTED = "corrected"         # Matched after correction or inference
    UNVERIFIABLE = "unverifiable"   # No usable match


class GeoServiceName(str, Enum):
    """Identifiers of the supported geocoding providers."""

    GOOGLE_MAPS = "google-maps"
    GEOCODIO = "geocodio"
    AZURE_MAPS = "azure-maps"
    GOOGLE_VALIDATION = "google-validation"


@dataclass(slots=True)
class StandardizedAddress:
    """A normalized US postal address.

    Attributes:
        street: Street name including type suffix ("Amphitheatre Pkwy").
        number: House/building number, None when the provider had none.
        city: City or locality name.
        state: Two-letter state code.
        zip: ZIP or ZIP+4 code.
        coordinates: Optional (latitude, longitude) pair.
    """

    street: str
    number: str | None
    city: str
    state: str
    zip: str
    coordinates: tuple[float, float] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "street": self.street,
            "number": self.number,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
        }
        if self.coordinates is not None:
            data["coordinates"] = [self.coordinates[0], self.coordinates[1]]
        return data


@dataclass(slots=True)
class AddressWithService(StandardizedAddress):
    """Alternate address tagged with the provider that returned it."""

    service: GeoServiceName | None = None

    @classmethod
    def from_address(
        cls, address: StandardizedAddress, service: GeoServiceName
    ) -> "AddressWithService":
        return cls(
            street=address.street,
            number=address.number,
            city=address.city,
            state=address.state,
            zip=address.zip,
            coordinates=address.coordinates,
            service=service,
        )

    def to_dict(self) -> dict[str, Any]:
        data = StandardizedAddress.to_dict(self)
        data["service"] = self.service.value if self.service else None
        return data


@dataclass(slots=True)
class ValidationResult:
    """One provider's answer for a free-form address.

    ``address`` is None exactly when ``status`` is UNVERIFIABLE.
    ``raw_response`` is kept for diagnostics only.
    """

    address: StandardizedAddress | None
    status: ValidationStatus
    raw_response: Any = None

    @classmethod
    def unverifiable(cls, raw_response: Any = None) -> "ValidationResult":
        return cls(address=None, status=ValidationStatus.UNVERIFIABLE, raw_response=raw_response)


@dataclass(slots=True)
class ServiceResult:
    """Per-provider record used during a single orchestration pass."""

    service: GeoServiceName
    result: ValidationResult


@dataclass(slots=True)
class ScoredResult(ServiceResult):
    score: int = 0


@dataclass(slots=True)
class OrchestratedResult:
    """Final answer of the orchestrator.

    ``alt`` lists every distinct address returned by the providers (best
    first) and is only set when there are at least two of them.
    """

    address: StandardizedAddress | None
    status: ValidationStatus
    alt: list[AddressWithService] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "address": self.address.to_dict() if self.address else None,
            "status": self.status.value,
        }
        if self.alt:
            data["alt"] = [a.to_dict() for a in self.alt]
        return data


@dataclass(slots=True)
class ValidateAddressResponse:
    """Body returned by the validate-address endpoint and stored in the cache."""

    address: StandardizedAddress | None
    status: ValidationStatus
    original_input: str
    alt: list[AddressWithService] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "address": self.address.to_dict() if self.address else None,
            "status": self.status.value,
            "originalInput": self.original_input,
        }
        if self.alt:
            data["alt"] = [a.to_dict() for a in self.alt]
        return data
