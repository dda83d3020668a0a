"""Exception types shared by the provider adapters, orchestrator and config."""


class AddressServiceError(Exception):
    """Base class for failures talking to an address provider."""


class ServiceTimeoutError(AddressServiceError):
    """A provider did not answer within its configured timeout.

    Kept distinct from other provider errors so the HTTP boundary can
    answer 503 instead of 502.
    """

    def __init__(self, message: str = "Address service timeout", service: str | None = None):
        super().__init__(message)
        self.service = service


class ServiceResponseError(AddressServiceError):
    """A provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str = "", service: str | None = None):
        super().__init__(f"HTTP {status_code}: {reason}".rstrip(": "))
        self.status_code = status_code
        self.service = service


class ConfigurationError(ValueError):
    """Missing or invalid configuration detected at construction time."""
