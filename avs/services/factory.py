"""
Address Service Factory.

Builds provider adapters and the orchestrator from ``avs.config.Config``.
"""

import logging
from typing import Union

from avs.address_models import GeoServiceName
from avs.config import Config

from .base import AddressService, ServiceConfig
from .orchestrator import AddressServiceOrchestrator

logger = logging.getLogger(__name__)


def build_service_configs(cfg: Config) -> dict[GeoServiceName, ServiceConfig]:
    """
    Build per-provider settings for every provider that has an API key.

    Args:
        cfg: Application configuration

    Returns:
        Mapping of provider to ServiceConfig (timeout in seconds)
    """
    timeout = cfg.address_service_timeout_ms / 1000
    return {
        service: ServiceConfig(timeout=timeout, api_key=cfg.api_key_for(service))
        for service in GeoServiceName
        if cfg.api_key_for(service)
    }


def create_orchestrator_from_config(cfg: Config) -> AddressServiceOrchestrator:
    """Create the orchestrator for the providers listed in GEO_SERVICES."""
    return AddressServiceOrchestrator(cfg.service_names, build_service_configs(cfg))


def create_address_validator(cfg: Config) -> Union[AddressService, AddressServiceOrchestrator]:
    """
    Create the validator used by the HTTP boundary.

    With a single provider the adapter is used directly, so its
    ServiceTimeoutError reaches the caller (503) instead of being folded
    into an unverifiable result.
    """
    orchestrator = create_orchestrator_from_config(cfg)
    if len(orchestrator.services) == 1:
        (service,) = orchestrator.services.values()
        logger.info(f"Single provider deployment: using {service.name.value} directly")
        return service
    return orchestrator
