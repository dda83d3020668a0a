"""Multi-provider address validation orchestrator.

Fans an address out to every configured provider in parallel, scores the
answers, deduplicates equivalent addresses and returns the best one plus
any disagreeing alternates.
"""

import asyncio
import logging
from types import MappingProxyType
from typing import Mapping, Optional

from avs.address_models import (
    AddressWithService,
    GeoServiceName,
    OrchestratedResult,
    ScoredResult,
    ServiceResult,
    ValidationResult,
    ValidationStatus,
)
from avs.address_normalizer import address_key
from avs.errors import ConfigurationError

from .base import AddressService, ServiceConfig
from .providers import (
    AzureMapsService,
    GeocodioService,
    GoogleMapsService,
    GoogleValidationService,
)

logger = logging.getLogger(__name__)

# Adapter class per provider identifier
SERVICE_CLASSES: dict[GeoServiceName, type[AddressService]] = {
    GeoServiceName.GOOGLE_MAPS: GoogleMapsService,
    GeoServiceName.GEOCODIO: GeocodioService,
    GeoServiceName.AZURE_MAPS: AzureMapsService,
    GeoServiceName.GOOGLE_VALIDATION: GoogleValidationService,
}

# Provider trust bonus added on top of the rubric below.
# USPS-backed standardization ranks above general-purpose geocoders.
PROVIDER_TRUST_BONUS: dict[GeoServiceName, int] = {
    GeoServiceName.GOOGLE_VALIDATION: 15,
    GeoServiceName.GOOGLE_MAPS: 10,
    GeoServiceName.GEOCODIO: 5,
    GeoServiceName.AZURE_MAPS: 3,
}

STATUS_SCORES = {
    ValidationStatus.VALID: 100,
    ValidationStatus.CORRECTED: 50,
    ValidationStatus.UNVERIFIABLE: 0,
}

# Completeness bonuses per address component
COMPONENT_SCORES = {
    "number": 20,
    "street": 15,
    "city": 10,
    "state": 10,
    "zip": 10,
    "coordinates": 5,
}


class AddressServiceOrchestrator:
    """Validates an address against all configured providers.

    Args:
        service_names: Providers to enable; iteration order decides ties.
        service_configs: Timeout and API key per provider.
        trust_bonus: Optional override of ``PROVIDER_TRUST_BONUS``.

    Raises:
        ConfigurationError: Unknown provider, or no config / API key for one.
    """

    def __init__(
        self,
        service_names,
        service_configs: Mapping[GeoServiceName, ServiceConfig],
        trust_bonus: Optional[Mapping[GeoServiceName, int]] = None,
    ):
        self._services: dict[GeoServiceName, AddressService] = {}
        self._in_flight: dict[str, asyncio.Task] = {}
        self._trust_bonus = dict(PROVIDER_TRUST_BONUS if trust_bonus is None else trust_bonus)

        # Check everything before building adapters, which open HTTP clients
        checked: dict[GeoServiceName, ServiceConfig] = {}
        for raw_name in service_names:
            try:
                name = GeoServiceName(raw_name)
            except ValueError:
                raise ConfigurationError(f"Unknown service: {raw_name}") from None

            config = service_configs.get(name)
            if config is None:
                raise ConfigurationError(f"Configuration missing for service: {name.value}")
            if not config.api_key:
                raise ConfigurationError(f"API key missing for service: {name.value}")
            checked[name] = config

        for name, config in checked.items():
            self._services[name] = self._create_service(name, config)

        logger.info(
            f"Address orchestrator configured with: {', '.join(s.value for s in self._services) or 'no services'}"
        )

    @staticmethod
    def _create_service(name: GeoServiceName, config: ServiceConfig) -> AddressService:
        service_cls = SERVICE_CLASSES.get(name)
        if service_cls is None:
            raise ConfigurationError(f"Unknown service: {name}")
        return service_cls(config)

    @property
    def services(self) -> Mapping[GeoServiceName, AddressService]:
        return MappingProxyType(self._services)

    @property
    def pending_count(self) -> int:
        return len(self._in_flight)

    async def validate(self, address: str) -> OrchestratedResult:
        """Validate ``address`` against every provider.

        Concurrent calls with the identical (unnormalized) string share one
        validation pass.
        """
        task = self._in_flight.get(address)
        if task is None:
            task = asyncio.ensure_future(self._run(address))
            self._in_flight[address] = task
        else:
            logger.debug(f"Joining in-flight validation for {address!r}")
        return await asyncio.shield(task)

    async def _run(self, address: str) -> OrchestratedResult:
        try:
            return await self._perform_validation(address)
        finally:
            if self._in_flight.get(address) is asyncio.current_task():
                del self._in_flight[address]

    async def _perform_validation(self, address: str) -> OrchestratedResult:
        logger.debug(
            f"Starting address validation for {address!r} "
            f"(services: {[s.value for s in self._services]})"
        )

        service_results = await asyncio.gather(
            *(self._call_service(name, service, address) for name, service in self._services.items())
        )

        valid_results = [
            sr for sr in service_results
            if sr.result.address is not None and sr.result.status != ValidationStatus.UNVERIFIABLE
        ]
        logger.debug(f"Valid results: {len(valid_results)} of {len(service_results)}")

        if not valid_results:
            logger.debug("No service could verify the address")
            return OrchestratedResult(address=None, status=ValidationStatus.UNVERIFIABLE)

        scored = [
            ScoredResult(service=sr.service, result=sr.result, score=self.score(sr))
            for sr in valid_results
        ]
        # sort() is stable: equal scores keep provider order
        scored.sort(key=lambda s: s.score, reverse=True)
        for s in scored:
            logger.debug(f"  - {s.service.value}: score={s.score}, status={s.result.status.value}")

        best = scored[0]
        logger.debug(f"Best result: {best.service.value} (score {best.score})")

        unique = self._deduplicate(scored)
        logger.debug(f"Unique addresses after deduplication: {len(unique)}")

        alt = None
        if len(unique) > 1:
            alt = [AddressWithService.from_address(u.result.address, u.service) for u in unique]

        return OrchestratedResult(address=best.result.address, status=best.result.status, alt=alt)

    async def _call_service(
        self, name: GeoServiceName, service: AddressService, address: str
    ) -> ServiceResult:
        try:
            result = await service.validate(address)
        except Exception as e:
            logger.warning(f"{name.value} failed, treating as unverifiable: {type(e).__name__}: {e}")
            return ServiceResult(service=name, result=ValidationResult.unverifiable())

        logger.debug(
            f"{name.value} response: status={result.status.value} "
            f"address={result.address.to_dict() if result.address else None} "
            f"has_raw_response={result.raw_response is not None}"
        )
        if result.raw_response is not None:
            logger.debug(f"{name.value} raw response: {result.raw_response}")
        return ServiceResult(service=name, result=result)

    def score(self, service_result: ServiceResult) -> int:
        """Additive accuracy score; status dominates, completeness and trust refine."""
        result = service_result.result
        score = STATUS_SCORES[result.status]

        address = result.address
        if address is not None:
            if address.number:
                score += COMPONENT_SCORES["number"]
            if address.street:
                score += COMPONENT_SCORES["street"]
            if address.city:
                score += COMPONENT_SCORES["city"]
            if address.state:
                score += COMPONENT_SCORES["state"]
            if address.zip:
                score += COMPONENT_SCORES["zip"]
            if address.coordinates:
                score += COMPONENT_SCORES["coordinates"]

        return score + self._trust_bonus.get(service_result.service, 0)

    @staticmethod
    def _deduplicate(scored: list[ScoredResult]) -> list[ScoredResult]:
        """Keep the first (highest scored) result per normalized address."""
        seen: set[str] = set()
        unique = []
        for s in scored:
            key = address_key(s.result.address)
            if key not in seen:
                seen.add(key)
                unique.append(s)
        return unique

    async def close(self) -> None:
        await asyncio.gather(*(s.close() for s in self._services.values()))
