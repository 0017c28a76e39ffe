"""
GIG Logistics Carrier Implementation

Wraps the GIG Logistics v1 REST API:
- POST /rates                     rate quotes
- POST /shipments                 book a shipment (returns a waybill number)
- GET  /track/{waybill}           tracking
- POST /shipments/{waybill}/cancel

Authenticated with a bearer API key (GIG_API_KEY).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from logistics.core.config import DEFAULT_GIG_BASE_URL
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
    ShipmentRequest,
    ShippingQuote,
    TrackingEvent,
    TrackingInfo,
)

logger = logging.getLogger(__name__)

GIG_STATUS_MAP = {
    "booked": ShipmentStatus.PENDING,
    "picked_up": ShipmentStatus.PICKED_UP,
    "in_transit": ShipmentStatus.IN_TRANSIT,
    "delivered": ShipmentStatus.DELIVERED,
    "failed_delivery": ShipmentStatus.FAILED,
}


@register_carrier("gig")
class GIGCarrier:
    """GIG Logistics shipping carrier."""

    name = "GIG Logistics"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_GIG_BASE_URL,
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

    def _format_contact(self, address: DeliveryAddress) -> Dict[str, Any]:
        return {
            "contact_name": address.recipient_name,
            "contact_phone": address.phone,
            "address": address.street,
            "city": address.city,
            "state": address.state,
        }

    async def get_quote(self, request: ShipmentRequest) -> List[ShippingQuote]:
        """Get GIG rates; any failure yields an empty list."""
        package = request.package_details
        payload = {
            "pickup_location": {
                "state": request.pickup_address.state,
                "city": request.pickup_address.city,
            },
            "delivery_location": {
                "state": request.delivery_address.state,
                "city": request.delivery_address.city,
            },
            "package": {
                "weight": package.weight,
                "value": package.value,
                "category": "fragile" if package.fragile else "standard",
            },
        }

        try:
            data = await self._client.request_json("POST", "/rates", payload)

            quotes = [
                ShippingQuote(
                    provider=self.name,
                    service_type=rate["service_type"],
                    price=float(rate["amount"]),
                    estimated_delivery_days=parse_delivery_days(rate["delivery_days"]),
                    tracking_available=True,
                )
                for rate in data.get("rates") or []
            ]

            logger.info(f"Got {len(quotes)} quotes from GIG Logistics")
            return quotes

        except CarrierAPIError as e:
            logger.error(f"GIG quote error: {e.message}")
            return []
        except (KeyError, TypeError, ValueError, ShippingValidationError) as e:
            logger.error(f"GIG quote response malformed: {e}")
            return []

    async def create_shipment(self, request: ShipmentRequest) -> CarrierShipment:
        package = request.package_details
        payload = {
            "pickup_details": self._format_contact(request.pickup_address),
            "delivery_details": self._format_contact(request.delivery_address),
            "package_details": {
                "weight": package.weight,
                "dimensions": {
                    "length": package.length,
                    "width": package.width,
                    "height": package.height,
                },
                "value": package.value,
                "description": package.description,
                "fragile": package.fragile,
            },
        }

        try:
            data = await self._client.request_json("POST", "/shipments", payload)
        except CarrierAPIError as e:
            raise ShipmentCreationError(
                message=e.message or "Failed to create GIG shipment",
                provider=self.name,
                details={"status_code": e.status_code},
            )

        waybill = data.get("waybill_number")
        if not waybill:
            raise ShipmentCreationError(
                message=data.get("message") or "GIG response did not include a waybill number",
                provider=self.name,
            )

        logger.info(f"GIG shipment created: {waybill}")
        return CarrierShipment(
            tracking_number=str(waybill),
            label_url=data.get("label_url"),
        )

    async def track_shipment(self, tracking_number: str) -> TrackingInfo:
        data = await self._client.request_json("GET", f"/track/{tracking_number}")

        history = []
        for event in tracking_event_payloads(data, "tracking_events", self.name):
            history.append(TrackingEvent(
                timestamp=parse_carrier_timestamp(event.get("date_time")) or datetime.now(timezone.utc),
                status=str(event.get("status", "")),
                location=event.get("location"),
                description=event.get("remarks"),
            ))

        return TrackingInfo(
            tracking_number=tracking_number,
            status=self.map_status(data.get("status")),
            current_location=data.get("current_location"),
            estimated_delivery=parse_carrier_timestamp(data.get("estimated_delivery_date")),
            history=history,
        )

    async def cancel_shipment(self, tracking_number: str) -> bool:
        try:
            response = await self._client.request("POST", f"/shipments/{tracking_number}/cancel")
        except CarrierAPIError as e:
            logger.error(f"GIG cancel error for {tracking_number}: {e.message}")
            return False

        return response.is_success

    def map_status(self, carrier_status: Optional[str]) -> ShipmentStatus:
        """Map GIG status to normalized ShipmentStatus."""
        return map_carrier_status(GIG_STATUS_MAP, carrier_status, self.name)
