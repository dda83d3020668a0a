"""
Address Provider Package.

Provider adapters plus the orchestrator that fans a query out to them.

Usage:
    from avs.services import create_orchestrator_from_config

    orchestrator = create_orchestrator_from_config(Config())
    result = await orchestrator.validate("1600 Amphitheatre Pkwy, Mountain View, CA")
"""

from .base import AddressService, ServiceConfig
from .factory import (
    build_service_configs,
    create_address_validator,
    create_orchestrator_from_config,
)
from .orchestrator import (
    PROVIDER_TRUST_BONUS,
    SERVICE_CLASSES,
    AddressServiceOrchestrator,
)
from .providers import (
    AzureMapsService,
    GeocodioService,
    GoogleMapsService,
    GoogleValidationService,
)

__all__ = [
    # Base
    "AddressService",
    "ServiceConfig",
    # Providers
    "AzureMapsService",
    "GeocodioService",
    "GoogleMapsService",
    "GoogleValidationService",
    # Orchestration
    "AddressServiceOrchestrator",
    "PROVIDER_TRUST_BONUS",
    "SERVICE_CLASSES",
    # Factory
    "build_service_configs",
    "create_address_validator",
    "create_orchestrator_from_config",
]
