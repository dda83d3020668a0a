"""Configuration loaded from the process environment.

``main.py`` loads ``.env`` before instantiating ``Config``; the core
components never read the environment themselves and receive their
settings explicitly.
"""

from dataclasses import dataclass, field
from os import getenv

from avs.address_models import GeoServiceName
from avs.errors import ConfigurationError


def _parse_bool(value: str, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if not value:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_int(value: str, default: int) -> int:
    """Parse int from environment variable."""
    try:
        return int(value) if value else default
    except ValueError:
        return default


def _parse_services(value: str) -> tuple[str, ...]:
    """Split a comma separated GEO_SERVICES value."""
    if not value:
        return (GeoServiceName.GOOGLE_MAPS.value,)
    return tuple(s.strip() for s in value.split(",") if s.strip())


# Environment variable holding each provider's credential
SERVICE_KEY_ENV = {
    GeoServiceName.GOOGLE_MAPS: "GOOGLE_MAPS_API_KEY",
    GeoServiceName.GEOCODIO: "GEOCODIO_API_KEY",
    GeoServiceName.AZURE_MAPS: "AZURE_MAPS_API_KEY",
    GeoServiceName.GOOGLE_VALIDATION: "GOOGLE_VALIDATION_API_KEY",
}


@dataclass(slots=True, frozen=True)
class Config:
    # ==================== Server ====================
    host: str = field(default_factory=lambda: getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _parse_int(getenv("PORT", ""), 3000))
    # Allowed CORS origin
    api_domain: str = field(default_factory=lambda: getenv("API_DOMAIN", "http://localhost:3000"))
    # Shared secret expected in the X-Token header
    api_token: str = field(default_factory=lambda: getenv("API_TOKEN", ""))

    # ==================== Providers ====================
    geo_services: tuple[str, ...] = field(
        default_factory=lambda: _parse_services(getenv("GEO_SERVICES", ""))
    )
    google_maps_api_key: str = field(default_factory=lambda: getenv("GOOGLE_MAPS_API_KEY", ""))
    geocodio_api_key: str = field(default_factory=lambda: getenv("GEOCODIO_API_KEY", ""))
    azure_maps_api_key: str = field(default_factory=lambda: getenv("AZURE_MAPS_API_KEY", ""))
    google_validation_api_key: str = field(
        default_factory=lambda: getenv("GOOGLE_VALIDATION_API_KEY", "")
    )
    # Per-provider request timeout
    address_service_timeout_ms: int = field(
        default_factory=lambda: _parse_int(getenv("ADDRESS_SERVICE_TIMEOUT", ""), 5000)
    )

    # ==================== Cache (in-memory only) ====================
    cache_max_size: int = field(
        default_factory=lambda: _parse_int(getenv("CACHE_MAX_SIZE", ""), 1000)
    )
    cache_ttl_ms: int = field(
        default_factory=lambda: _parse_int(getenv("CACHE_TTL_MS", ""), 3_600_000)
    )

    debug: bool = field(default_factory=lambda: _parse_bool(getenv("DEBUG", ""), False))

    @property
    def service_names(self) -> list[GeoServiceName]:
        """Configured providers as enum members.

        Raises:
            ConfigurationError: If an identifier is not a supported provider.
        """
        names = []
        for raw in self.geo_services:
            try:
                names.append(GeoServiceName(raw))
            except ValueError:
                supported = ", ".join(s.value for s in GeoServiceName)
                raise ConfigurationError(
                    f"Unknown service in GEO_SERVICES: {raw!r} (supported: {supported})"
                ) from None
        return names

    def api_key_for(self, service: GeoServiceName) -> str:
        """Get the credential configured for a provider."""
        return {
            GeoServiceName.GOOGLE_MAPS: self.google_maps_api_key,
            GeoServiceName.GEOCODIO: self.geocodio_api_key,
            GeoServiceName.AZURE_MAPS: self.azure_maps_api_key,
            GeoServiceName.GOOGLE_VALIDATION: self.google_validation_api_key,
        }[service]

    def validate(self) -> None:
        """Fail fast on settings the service cannot start without.

        Raises:
            ConfigurationError: Describing the first problem found.
        """
        if not self.api_token:
            raise ConfigurationError("API_TOKEN is required")

        services = self.service_names
        if not services:
            raise ConfigurationError("GEO_SERVICES must contain at least one valid service")

        for service in services:
            if not self.api_key_for(service):
                raise ConfigurationError(
                    f"{SERVICE_KEY_ENV[service]} is required when {service.value} is in GEO_SERVICES"
                )

        if self.address_service_timeout_ms <= 0:
            raise ConfigurationError("ADDRESS_SERVICE_TIMEOUT must be positive")
        if self.cache_max_size <= 0:
            raise ConfigurationError("CACHE_MAX_SIZE must be positive")
        if self.cache_ttl_ms <= 0:
            raise ConfigurationError("CACHE_TTL_MS must be positive")
