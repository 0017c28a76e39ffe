"""
Shipping Schemas

Pydantic models for the shipping API. Request models convert into the
carrier-agnostic dataclasses via to_domain().
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from logistics.models.shipment import ItemCategory, ShipmentStatus
from logistics.modules.shipping.types import (
    DeliveryAddress,
    PackageDetails,
    ShipmentRequest,
)


# ==================== Address / Package Schemas ====================


class AddressIn(BaseModel):
    """Pickup or delivery address."""
    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    country: str = Field("Nigeria", min_length=2, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    landmark: Optional[str] = Field(None, max_length=200)
    phone: str = Field(..., min_length=5, max_length=20)
    email: str = Field(..., max_length=100)
    recipient_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("state", "city")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip()

    def to_domain(self) -> DeliveryAddress:
        return DeliveryAddress(**self.model_dump())


class PackageIn(BaseModel):
    """Parcel details. Weight in kg, dimensions in cm."""
    weight: float = Field(..., gt=0, description="Weight in kg")
    length: float = Field(..., gt=0, description="Length in cm")
    width: float = Field(..., gt=0, description="Width in cm")
    height: float = Field(..., gt=0, description="Height in cm")
    value: float = Field(..., ge=0, description="Declared value for insurance")
    description: str = Field("", max_length=500)
    fragile: bool = False
    category: ItemCategory = ItemCategory.OTHER

    def to_domain(self) -> PackageDetails:
        return PackageDetails(**self.model_dump())


# ==================== Quote Schemas ====================


class QuoteRequest(BaseModel):
    """Request shipping quotes from every configured carrier."""
    pickup_address: AddressIn
    delivery_address: AddressIn
    package_details: PackageIn

    def to_domain(self, **extra) -> ShipmentRequest:
        return ShipmentRequest(
            pickup_address=self.pickup_address.to_domain(),
            delivery_address=self.delivery_address.to_domain(),
            package_details=self.package_details.to_domain(),
            **extra,
        )


class QuoteResponse(BaseModel):
    """A single quote."""
    provider: str
    service_type: str
    price: float
    estimated_delivery_days: int
    tracking_available: bool

    model_config = ConfigDict(from_attributes=True)


class QuoteListResponse(BaseModel):
    """All quotes, cheapest first."""
    quotes: List[QuoteResponse]


# ==================== Shipment Schemas ====================


class ShipmentCreate(QuoteRequest):
    """Book a shipment."""
    provider_name: Optional[str] = Field(None, description="Preferred carrier; first available if omitted")
    insurance_required: bool = False

    def to_shipment_request(self) -> ShipmentRequest:
        return self.to_domain(
            preferred_provider=self.provider_name,
            insurance_required=self.insurance_required,
        )


class ShipmentResponse(BaseModel):
    """A booked shipment."""
    tracking_number: str
    provider: str
    label_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ==================== Tracking Schemas ====================


class TrackingEventResponse(BaseModel):
    """A single tracking event."""
    timestamp: datetime
    status: str
    location: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TrackingInfoResponse(BaseModel):
    """Normalized tracking information."""
    tracking_number: str
    status: ShipmentStatus
    current_location: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    history: List[TrackingEventResponse] = []

    model_config = ConfigDict(from_attributes=True)


class TrackingResponse(BaseModel):
    tracking_info: TrackingInfoResponse
    provider: str


class CancelResponse(BaseModel):
    tracking_number: str
    provider: str
    cancelled: bool


class ProvidersResponse(BaseModel):
    providers: List[str]


# ==================== Packaging Schemas ====================


class PackagingRequest(BaseModel):
    """Ask for a category's packaging defaults."""
    category: ItemCategory
    value: float = Field(..., ge=0)
    weight: float = Field(..., gt=0, description="Weight in kg")


class PackagingResponse(BaseModel):
    category: ItemCategory
    weight: float
    fragile: bool
    insurance_required: bool
    special_handling: bool
