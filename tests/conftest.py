"""
Pytest configuration and fixtures for logistics tests.
"""
import asyncio
import os
from typing import List, Optional

import pytest

# Keep real carrier credentials out of the test run
os.environ["ENVIRONMENT"] = "development"
os.environ["SENDBOX_API_KEY"] = ""
os.environ["GIG_API_KEY"] = ""

from logistics.core.exceptions import ShipmentCreationError
from logistics.models.shipment import ItemCategory, ShipmentStatus
from logistics.modules.shipping.types import (
    CarrierShipment,
    DeliveryAddress,
    PackageDetails,
    ShipmentRequest,
    ShippingQuote,
    TrackingInfo,
)


class FakeProvider:
    """Scriptable carrier used in place of a real adapter."""

    def __init__(
        self,
        name: str,
        prices: Optional[List[float]] = None,
        fail_quote: bool = False,
        fail_create: bool = False,
        delay: float = 0.0,
    ):
        self.name = name
        self.prices = prices if prices is not None else [1500.0]
        self.fail_quote = fail_quote
        self.fail_create = fail_create
        self.delay = delay
        self.create_calls = 0
        self.track_calls = 0
        self.closed = False

    async def get_quote(self, request: ShipmentRequest) -> List[ShippingQuote]:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_quote:
            raise RuntimeError(f"{self.name} is down")
        return [
            ShippingQuote(
                provider=self.name,
                service_type=f"Tier {i}",
                price=price,
                estimated_delivery_days=i + 1,
                tracking_available=True,
            )
            for i, price in enumerate(self.prices)
        ]

    async def create_shipment(self, request: ShipmentRequest) -> CarrierShipment:
        self.create_calls += 1
        if self.fail_create:
            raise ShipmentCreationError(f"{self.name} refused the booking", provider=self.name)
        return CarrierShipment(
            tracking_number=f"{self.name.upper()}-0001",
            label_url=f"https://labels.example.com/{self.name}",
        )

    async def track_shipment(self, tracking_number: str) -> TrackingInfo:
        self.track_calls += 1
        return TrackingInfo(tracking_number=tracking_number, status=ShipmentStatus.DELIVERED)

    async def cancel_shipment(self, tracking_number: str) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def pickup_address() -> DeliveryAddress:
    return DeliveryAddress(
        street="12 Admiralty Way",
        city="Lekki",
        state="Lagos",
        country="Nigeria",
        phone="+2348012345678",
        email="studio@example.com",
        recipient_name="Ada Studio",
    )


@pytest.fixture
def make_request(pickup_address):
    """Factory for ShipmentRequest with overridable destination and package."""

    def _make(
        state: str = "Lagos",
        weight: float = 2.0,
        value: float = 60000,
        fragile: bool = False,
        category: ItemCategory = ItemCategory.ART,
        preferred_provider: Optional[str] = None,
    ) -> ShipmentRequest:
        return ShipmentRequest(
            pickup_address=pickup_address,
            delivery_address=DeliveryAddress(
                street="4 Zoo Road",
                city="Capital",
                state=state,
                country="Nigeria",
                phone="+2348098765432",
                email="buyer@example.com",
                recipient_name="Musa Buyer",
                landmark="Opposite the market",
            ),
            package_details=PackageDetails(
                weight=weight,
                length=60,
                width=45,
                height=8,
                value=value,
                description="Framed print",
                fragile=fragile,
                category=category,
            ),
            preferred_provider=preferred_provider,
        )

    return _make


@pytest.fixture
def shipment_request(make_request) -> ShipmentRequest:
    return make_request()


@pytest.fixture
def address_payload() -> dict:
    """Address body for API tests."""
    return {
        "street": "4 Zoo Road",
        "city": "Kano",
        "state": "Kano",
        "country": "Nigeria",
        "phone": "+2348098765432",
        "email": "buyer@example.com",
        "recipient_name": "Musa Buyer",
    }


@pytest.fixture
def package_payload() -> dict:
    return {
        "weight": 1.0,
        "length": 30,
        "width": 20,
        "height": 5,
        "value": 10000,
        "description": "Paperback",
        "fragile": False,
        "category": "book",
    }


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider
