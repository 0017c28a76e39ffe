"""
Carrier-Agnostic Data Classes

Shared contracts passed between callers, the aggregation service and every
carrier adapter. Units: weight in kg, dimensions in cm, money in a single
implicit currency (no conversion is ever performed).

All classes are immutable; adapters read a ShipmentRequest and produce their
own output, they never modify it.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from logistics.core.exceptions import ShippingValidationError
from logistics.models.shipment import ItemCategory, ShipmentStatus


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class DeliveryAddress:
    """A pickup or delivery location."""
    street: str
    city: str
    state: str
    country: str
    phone: str
    email: str
    recipient_name: str
    postal_code: Optional[str] = None
    landmark: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "postal_code": self.postal_code,
            "landmark": self.landmark,
            "phone": self.phone,
            "email": self.email,
            "recipient_name": self.recipient_name,
        }


@dataclass(frozen=True)
class PackageDetails:
    """Physical and declared-value details of a parcel."""
    weight: float  # kg
    length: float  # cm
    width: float  # cm
    height: float  # cm
    value: float  # insurable value
    description: str = ""
    fragile: bool = False
    category: ItemCategory = ItemCategory.OTHER

    def __post_init__(self):
        for name in ("weight", "length", "width", "height"):
            if getattr(self, name) <= 0:
                raise ShippingValidationError(
                    f"Package {name} must be positive",
                    field=name,
                )
        if self.value < 0:
            raise ShippingValidationError("Package value cannot be negative", field="value")

        if not isinstance(self.category, ItemCategory):
            try:
                object.__setattr__(self, "category", ItemCategory(self.category))
            except ValueError:
                raise ShippingValidationError(
                    f"Unknown item category: {self.category}",
                    field="category",
                )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weight": self.weight,
            "length": self.length,
            "width": self.width,
            "height": self.height,
            "value": self.value,
            "description": self.description,
            "fragile": self.fragile,
            "category": self.category.value,
        }


@dataclass(frozen=True)
class ShipmentRequest:
    """The single unit of work handed to the service and to every adapter."""
    pickup_address: DeliveryAddress
    delivery_address: DeliveryAddress
    package_details: PackageDetails
    preferred_provider: Optional[str] = None
    insurance_required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pickup_address": self.pickup_address.to_dict(),
            "delivery_address": self.delivery_address.to_dict(),
            "package_details": self.package_details.to_dict(),
            "preferred_provider": self.preferred_provider,
            "insurance_required": self.insurance_required,
        }


@dataclass(frozen=True)
class ShippingQuote:
    """One service tier offered by one carrier."""
    provider: str
    service_type: str
    price: float
    estimated_delivery_days: int
    tracking_available: bool = True

    def __post_init__(self):
        if self.price < 0:
            raise ShippingValidationError("Quote price cannot be negative", field="price")
        if self.estimated_delivery_days < 0:
            raise ShippingValidationError(
                "Estimated delivery days cannot be negative",
                field="estimated_delivery_days",
            )


@dataclass(frozen=True)
class CarrierShipment:
    """What an adapter hands back after booking."""
    tracking_number: str
    label_url: Optional[str] = None


@dataclass(frozen=True)
class ShipmentRecord:
    """A booked shipment, tagged with the provider that fulfilled it."""
    tracking_number: str
    provider: str
    label_url: Optional[str] = None


@dataclass(frozen=True)
class TrackingEvent:
    """A single tracking event, status kept in the carrier's own vocabulary."""
    timestamp: datetime
    status: str
    location: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": _isoformat(self.timestamp),
            "status": self.status,
            "location": self.location,
            "description": self.description,
        }


@dataclass(frozen=True)
class TrackingInfo:
    """Full tracking information with a normalized status."""
    tracking_number: str
    status: ShipmentStatus
    current_location: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    history: List[TrackingEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tracking_number": self.tracking_number,
            "status": self.status.value,
            "current_location": self.current_location,
            "estimated_delivery": _isoformat(self.estimated_delivery),
            "history": [event.to_dict() for event in self.history],
        }
