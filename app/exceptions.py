"""Custom exceptions shared across services."""

from dataclasses import dataclass


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for service layer failures."""

    message: str
    code: str = "service_error"
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class ProviderTransportError(ServiceError):
    """Raised when the call to the image provider itself fails."""

    code: str = "provider_transport_error"


@dataclass(eq=False)
class ProviderError(ServiceError):
    """Raised when the provider answers without usable image data."""

    code: str = "provider_error"
