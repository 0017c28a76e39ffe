"""
Local Delivery Carrier

Prices shipments algorithmically instead of calling a remote API, so it is
always available. The aggregation service appends it after every remote
carrier, which guarantees at least one set of quotes for any request.

Pricing:
    base      = max(1000, weight_kg * 500)
    insurance = value * 0.02 when value > 50000, else 0
    price     = round(base * tier_multiplier + insurance)
    fragile parcels add a flat 500 to every tier
"""
import logging
import math
import random
import string
import time
from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from logistics.models.shipment import ShipmentStatus
from logistics.modules.shipping.types import (
    CarrierShipment,
    ShipmentRequest,
    ShippingQuote,
    TrackingEvent,
    TrackingInfo,
)

logger = logging.getLogger(__name__)

MINIMUM_BASE_PRICE = 1000
PRICE_PER_KG = 500
INSURANCE_THRESHOLD = 50000
INSURANCE_RATE = 0.02
FRAGILE_SURCHARGE = 500

HOME_STATE = "lagos"
NEARBY_STATES = frozenset({"ogun", "oyo", "osun"})

# (service_type, multiplier, delivery_days, tracking_available)
Tier = Tuple[str, float, int, bool]

LAGOS_TIERS: List[Tier] = [
    ("Same Day Delivery", 1.5, 1, True),
    ("Standard Delivery", 1.0, 2, True),
]

NEARBY_TIERS: List[Tier] = [
    ("Express Delivery", 1.8, 2, True),
    ("Standard Delivery", 1.3, 4, True),
]

NATIONWIDE_TIERS: List[Tier] = [
    ("Express Delivery", 2.5, 3, True),
    ("Standard Delivery", 1.8, 6, True),
    ("Economy Delivery", 1.2, 10, False),
]

TRACKING_PREFIX = "LGE"
PICKUP_LOCATION = "Lagos Pickup Center"
HUB_LOCATION = "Lagos Distribution Center"


def round_half_up(value: float) -> int:
    """Round .5 upward; Python's round() would send 2.5 to 2."""
    return int(math.floor(value + 0.5))


def tiers_for_state(state: str) -> List[Tier]:
    """Pick the zone tiers for a destination state (case-insensitive)."""
    normalized = (state or "").strip().lower()
    if normalized == HOME_STATE:
        return LAGOS_TIERS
    if normalized in NEARBY_STATES:
        return NEARBY_TIERS
    return NATIONWIDE_TIERS


class LocalDeliveryCarrier:
    """Guaranteed-available carrier with deterministic pricing."""

    name = "Local Delivery"

    async def get_quote(self, request: ShipmentRequest) -> List[ShippingQuote]:
        package = request.package_details

        base_price = max(MINIMUM_BASE_PRICE, package.weight * PRICE_PER_KG)
        insurance = package.value * INSURANCE_RATE if package.value > INSURANCE_THRESHOLD else 0
        surcharge = FRAGILE_SURCHARGE if package.fragile else 0

        quotes = [
            ShippingQuote(
                provider=self.name,
                service_type=service_type,
                price=round_half_up(base_price * multiplier + insurance) + surcharge,
                estimated_delivery_days=days,
                tracking_available=tracking,
            )
            for service_type, multiplier, days, tracking in tiers_for_state(request.delivery_address.state)
        ]

        logger.debug(f"Local Delivery priced {len(quotes)} tiers for {request.delivery_address.state}")
        return quotes

    async def create_shipment(self, request: ShipmentRequest) -> CarrierShipment:
        suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
        tracking_number = f"{TRACKING_PREFIX}{int(time.time() * 1000)}{suffix}"

        logger.info(f"Local Delivery shipment created: {tracking_number}")
        return CarrierShipment(tracking_number=tracking_number, label_url=None)

    async def track_shipment(self, tracking_number: str) -> TrackingInfo:
        # Synthetic history: there is no remote system to ask
        now = datetime.now(timezone.utc)

        return TrackingInfo(
            tracking_number=tracking_number,
            status=ShipmentStatus.IN_TRANSIT,
            current_location=HUB_LOCATION,
            estimated_delivery=now + timedelta(days=2),
            history=[
                TrackingEvent(
                    timestamp=now - timedelta(hours=24),
                    status=ShipmentStatus.PICKED_UP.value,
                    location=PICKUP_LOCATION,
                    description="Package picked up from sender",
                ),
                TrackingEvent(
                    timestamp=now,
                    status=ShipmentStatus.IN_TRANSIT.value,
                    location=HUB_LOCATION,
                    description="Package in transit to destination",
                ),
            ],
        )

    async def cancel_shipment(self, tracking_number: str) -> bool:
        logger.info(f"Local Delivery shipment cancelled: {tracking_number}")
        return True

    async def aclose(self) -> None:
        return None
