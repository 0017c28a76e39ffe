"""
Carrier Interface

Every carrier, whether it calls a remote HTTP API or prices locally, provides:
  - Quotes (one per service tier; never raises, returns [] on failure)
  - Shipment creation (raises ShipmentCreationError on failure)
  - Tracking (normalized to ShipmentStatus; unknown statuses -> PENDING)
  - Cancellation (returns a bool, never raises)

Carriers conform structurally to LogisticsProvider; they do not share a base
class. Remote carriers share HTTP plumbing by holding a CarrierHTTPClient.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

import httpx

from logistics.core.exceptions import CarrierAPIError
from logistics.models.shipment import ShipmentStatus
from logistics.modules.shipping.types import (
    CarrierShipment,
    ShipmentRequest,
    ShippingQuote,
    TrackingInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@runtime_checkable
class LogisticsProvider(Protocol):
    """Capability contract implemented by every carrier adapter."""

    name: str

    async def get_quote(self, request: ShipmentRequest) -> List[ShippingQuote]:
        ...

    async def create_shipment(self, request: ShipmentRequest) -> CarrierShipment:
        ...

    async def track_shipment(self, tracking_number: str) -> TrackingInfo:
        ...

    async def cancel_shipment(self, tracking_number: str) -> bool:
        ...


class CarrierHTTPClient:
    """
    Authenticated JSON client for one carrier's REST API.

    Owns a single httpx.AsyncClient, created on first use, with a bearer
    token and a per-request timeout.
    """

    def __init__(
        self,
        provider: str,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._http_client

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request; only transport failures raise here."""
        client = await self._get_http_client()

        try:
            response = await client.request(method.upper(), path, json=data)
        except httpx.RequestError as e:
            logger.error(f"{self.provider} API request failed: {e}")
            raise CarrierAPIError(
                message=f"Network error: {e}",
                provider=self.provider,
                code="NETWORK_ERROR",
            )

        logger.debug(f"{self.provider} API {method.upper()} {path} -> {response.status_code}")
        return response

    async def request_json(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request and decode the JSON body, raising on HTTP errors."""
        response = await self.request(method, path, data)

        if response.status_code >= 400:
            error_data: Dict[str, Any] = {}
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"raw": response.text[:500]}

            error_msg = f"{self.provider} API error"
            if isinstance(error_data, dict) and error_data.get("message"):
                error_msg = str(error_data["message"])

            logger.error(f"{self.provider} API error: {response.status_code} - {error_msg}")
            raise CarrierAPIError(
                message=error_msg,
                provider=self.provider,
                status_code=response.status_code,
                code=f"HTTP_{response.status_code}",
                details={"response": error_data},
            )

        try:
            body = response.json()
        except ValueError:
            raise CarrierAPIError(
                message=f"{self.provider} returned a non-JSON response",
                provider=self.provider,
                status_code=response.status_code,
                code="INVALID_RESPONSE",
            )

        if not isinstance(body, dict):
            raise CarrierAPIError(
                message=f"{self.provider} returned an unexpected payload",
                provider=self.provider,
                status_code=response.status_code,
                code="INVALID_RESPONSE",
            )

        return body


def map_carrier_status(
    status_map: Mapping[str, ShipmentStatus],
    carrier_status: Optional[str],
    provider: str,
) -> ShipmentStatus:
    """
    Map a carrier's status string onto ShipmentStatus.

    Lookup is case-insensitive. Missing or unknown statuses map to PENDING so
    tracking stays usable when a carrier introduces a new status.
    """
    if not carrier_status:
        return ShipmentStatus.PENDING

    key = str(carrier_status).lower().strip()
    if key in status_map:
        return status_map[key]

    logger.warning(f"Unknown {provider} status: {carrier_status}, defaulting to PENDING")
    return ShipmentStatus.PENDING


def parse_carrier_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from a carrier payload; None if unusable."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable carrier timestamp: {value}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_delivery_days(value: Any) -> int:
    """Whole number of delivery days; fractional values are rejected, not truncated."""
    days = float(value)
    if not days.is_integer():
        raise ValueError(f"Delivery days must be a whole number, got {value!r}")
    return int(days)


def tracking_event_payloads(data: Mapping[str, Any], key: str, provider: str) -> List[Dict[str, Any]]:
    """
    The list of event objects under data[key].

    Raises:
        CarrierAPIError: INVALID_RESPONSE if the list or any event is not an object
    """
    events = data.get(key) or []
    if not isinstance(events, list) or not all(isinstance(event, dict) for event in events):
        logger.error(f"{provider} returned malformed {key}")
        raise CarrierAPIError(
            message=f"{provider} returned malformed tracking events",
            provider=provider,
            code="INVALID_RESPONSE",
            details={"field": key},
        )
    return events
