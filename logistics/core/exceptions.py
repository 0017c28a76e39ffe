"""
Logistics Exception Hierarchy

Structured exception classes for the carrier adapters and the aggregation
service. All exceptions include code, message, and details so callers can
log them or turn them into API responses.

Exception Hierarchy:
    LogisticsBaseError
    └── ShippingError
        ├── ShippingValidationError
        ├── CarrierAPIError
        ├── ShipmentCreationError
        ├── ProviderNotFoundError
        └── NoProvidersAvailableError
"""
from typing import Optional, Dict, Any


class LogisticsBaseError(Exception):
    """
    Base exception for all logistics errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
        severity: P0-P3 severity level
    """

    default_code: str = "LOGISTICS_ERROR"
    default_severity: str = "P2"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[str] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.severity = severity or self.default_severity
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# SHIPPING ERRORS
# =============================================================================

class ShippingError(LogisticsBaseError):
    """Base exception for shipping-related errors."""
    default_code = "SHIPPING_ERROR"
    default_severity = "P1"


class ShippingValidationError(ShippingError):
    """Package or address data failed validation."""
    default_code = "SHIPPING_VALIDATION_FAILED"
    default_severity = "P2"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details["field"] = field
        super().__init__(message, details=details, **kwargs)


class CarrierAPIError(ShippingError):
    """A carrier's HTTP API failed or returned an unusable response."""
    default_code = "CARRIER_API_ERROR"
    default_severity = "P2"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs
    ):
        self.provider = provider
        self.status_code = status_code
        details = kwargs.pop("details", {})
        details.update({
            "provider": provider,
            "status_code": status_code,
        })
        super().__init__(message, details=details, **kwargs)


class ShipmentCreationError(ShippingError):
    """A carrier refused or failed to book a shipment."""
    default_code = "SHIPMENT_CREATION_FAILED"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        **kwargs
    ):
        self.provider = provider
        details = kwargs.pop("details", {})
        details["provider"] = provider
        super().__init__(message, details=details, **kwargs)


class ProviderNotFoundError(ShippingError):
    """The named provider is not in the configured set."""
    default_code = "PROVIDER_NOT_FOUND"
    default_severity = "P3"

    def __init__(self, provider_name: str, **kwargs):
        self.provider_name = provider_name
        details = kwargs.pop("details", {})
        details["provider"] = provider_name
        super().__init__(f"Provider {provider_name} not found", details=details, **kwargs)


class NoProvidersAvailableError(ShippingError):
    """No logistics providers are configured."""
    default_code = "NO_PROVIDERS_AVAILABLE"
    default_severity = "P0"
