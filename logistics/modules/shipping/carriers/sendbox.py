"""
Sendbox Carrier Implementation

Wraps the Sendbox shipping REST API:
- POST /quote            rate quotes
- POST /shipment         book a shipment
- GET  /track/{number}   tracking
- POST /cancel/{number}  cancellation

Authenticated with a bearer API key (SENDBOX_API_KEY).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from logistics.core.config import DEFAULT_SENDBOX_BASE_URL
from logistics.core.exceptions import (
    CarrierAPIError,
    ShipmentCreationError,
    ShippingValidationError,
)
from logistics.models.shipment import ShipmentStatus
from logistics.modules.shipping.carriers import register_carrier
from logistics.modules.shipping.carriers.base import (
    DEFAULT_TIMEOUT_SECONDS,
    CarrierHTTPClient,
    map_carrier_status,
    parse_carrier_timestamp,
    parse_delivery_days,
    tracking_event_payloads,
)
from logistics.modules.shipping.types import (
    CarrierShipment,
    DeliveryAddress,
    PackageDetails,
    ShipmentRequest,
    ShippingQuote,
    TrackingEvent,
    TrackingInfo,
)

logger = logging.getLogger(__name__)

# Sendbox already uses the canonical vocabulary
SENDBOX_STATUS_MAP = {
    "pending": ShipmentStatus.PENDING,
    "picked_up": ShipmentStatus.PICKED_UP,
    "in_transit": ShipmentStatus.IN_TRANSIT,
    "delivered": ShipmentStatus.DELIVERED,
    "failed": ShipmentStatus.FAILED,
}


@register_carrier("sendbox")
class SendboxCarrier:
    """Sendbox shipping carrier."""

    name = "Sendbox"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_SENDBOX_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = CarrierHTTPClient(
            provider=self.name,
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _format_address(self, address: DeliveryAddress) -> Dict[str, Any]:
        return {
            "name": address.recipient_name,
            "phone": address.phone,
            "email": address.email,
            "address": address.street,
            "city": address.city,
            "state": address.state,
            "country": address.country,
        }

    def _format_package(self, package: PackageDetails) -> Dict[str, Any]:
        return {
            "weight": package.weight,
            "length": package.length,
            "width": package.width,
            "height": package.height,
            "value": package.value,
            "description": package.description,
            "category": package.category.value,
        }

    def _build_payload(self, request: ShipmentRequest) -> Dict[str, Any]:
        return {
            "origin": self._format_address(request.pickup_address),
            "destination": self._format_address(request.delivery_address),
            "parcel": self._format_package(request.package_details),
        }

    async def get_quote(self, request: ShipmentRequest) -> List[ShippingQuote]:
        """Get Sendbox quotes; any failure yields an empty list."""
        try:
            data = await self._client.request_json("POST", "/quote", self._build_payload(request))

            quotes = []
            for quote in data.get("quotes") or []:
                quotes.append(ShippingQuote(
                    provider=self.name,
                    service_type=quote["service_name"],
                    price=float(quote["amount"]),
                    estimated_delivery_days=parse_delivery_days(quote["delivery_time"]),
                    tracking_available=True,
                ))

            logger.info(f"Got {len(quotes)} quotes from Sendbox")
            return quotes

        except CarrierAPIError as e:
            logger.error(f"Sendbox quote error: {e.message}")
            return []
        except (KeyError, TypeError, ValueError, ShippingValidationError) as e:
            logger.error(f"Sendbox quote response malformed: {e}")
            return []

    async def create_shipment(self, request: ShipmentRequest) -> CarrierShipment:
        payload = self._build_payload(request)
        payload["insurance"] = request.insurance_required

        try:
            data = await self._client.request_json("POST", "/shipment", payload)
        except CarrierAPIError as e:
            raise ShipmentCreationError(
                message=e.message or "Failed to create shipment",
                provider=self.name,
                details={"status_code": e.status_code},
            )

        tracking_number = data.get("tracking_number")
        if not tracking_number:
            raise ShipmentCreationError(
                message=data.get("message") or "Sendbox response did not include a tracking number",
                provider=self.name,
            )

        logger.info(f"Sendbox shipment created: {tracking_number}")
        return CarrierShipment(
            tracking_number=str(tracking_number),
            label_url=data.get("label_url"),
        )

    async def track_shipment(self, tracking_number: str) -> TrackingInfo:
        data = await self._client.request_json("GET", f"/track/{tracking_number}")

        history = [
            TrackingEvent(
                timestamp=parse_carrier_timestamp(event.get("timestamp")) or datetime.now(timezone.utc),
                status=str(event.get("status", "")),
                location=event.get("location"),
                description=event.get("description"),
            )
            for event in tracking_event_payloads(data, "tracking_history", self.name)
        ]

        return TrackingInfo(
            tracking_number=tracking_number,
            status=self.map_status(data.get("status")),
            current_location=data.get("current_location"),
            estimated_delivery=parse_carrier_timestamp(data.get("estimated_delivery")),
            history=history,
        )

    async def cancel_shipment(self, tracking_number: str) -> bool:
        try:
            response = await self._client.request("POST", f"/cancel/{tracking_number}")
        except CarrierAPIError as e:
            logger.error(f"Sendbox cancel error for {tracking_number}: {e.message}")
            return False

        return response.is_success

    def map_status(self, carrier_status: Optional[str]) -> ShipmentStatus:
        """Map Sendbox status to normalized ShipmentStatus."""
        return map_carrier_status(SENDBOX_STATUS_MAP, carrier_status, self.name)
