"""
Logistics Service

Presents one API over every configured carrier:
- Fans quote requests out to all carriers concurrently and returns the
  combined list sorted by price (cheapest first)
- Books shipments with a single failover to a different carrier
- Routes tracking and cancellation to the carrier that owns the shipment

Usage:
    service = LogisticsService.from_settings()
    quotes = await service.get_shipping_quotes(request)
    record = await service.create_shipment(request, "Sendbox")
"""
import asyncio
import logging
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional

from logistics.core.config import Settings, settings as default_settings
from logistics.core.exceptions import NoProvidersAvailableError, ProviderNotFoundError
from logistics.modules.shipping.carriers import build_providers
from logistics.modules.shipping.carriers.base import LogisticsProvider
from logistics.modules.shipping.types import (
    ShipmentRecord,
    ShipmentRequest,
    ShippingQuote,
    TrackingEvent,
    TrackingInfo,
)

logger = logging.getLogger(__name__)


class LogisticsService:
    """
    Aggregation service over an ordered list of carriers.

    The provider list is fixed at construction. When built from credentials
    it always ends with Local Delivery, so it is never empty.
    """

    def __init__(
        self,
        providers: Optional[Iterable[LogisticsProvider]] = None,
        credentials: Optional[Mapping[str, Optional[str]]] = None,
        quote_timeout: Optional[float] = None,
        app_settings: Optional[Settings] = None,
    ):
        """
        Args:
            providers: Explicit provider list, used as given
            credentials: {carrier_key: api_key} used when providers is None;
                defaults to the credentials in settings
            quote_timeout: Optional bound on each carrier's quote call
            app_settings: Settings to read defaults from
        """
        app_settings = app_settings or default_settings

        if providers is not None:
            self._providers: List[LogisticsProvider] = list(providers)
        else:
            self._providers = build_providers(
                credentials if credentials is not None else app_settings.carrier_credentials(),
                base_urls=app_settings.carrier_base_urls(),
                timeout=app_settings.CARRIER_HTTP_TIMEOUT_SECONDS,
            )

        self.quote_timeout = (
            quote_timeout if quote_timeout is not None else app_settings.LOGISTICS_QUOTE_TIMEOUT_SECONDS
        )

        logger.info(f"Logistics providers configured: {self.get_available_providers()}")

    @classmethod
    def from_settings(cls, app_settings: Optional[Settings] = None) -> "LogisticsService":
        """Build the service from environment configuration."""
        return cls(app_settings=app_settings)

    def get_available_providers(self) -> List[str]:
        """Names of configured providers, in selection order."""
        return [p.name for p in self._providers]

    def get_provider(self, provider_name: str) -> Optional[LogisticsProvider]:
        for provider in self._providers:
            if provider.name == provider_name:
                return provider
        return None

    # ==================== Quotes ====================

    async def _quote_from(self, provider: LogisticsProvider, request: ShipmentRequest) -> List[ShippingQuote]:
        """One carrier's quotes; errors and timeouts count as no quotes."""
        try:
            if self.quote_timeout is not None:
                return await asyncio.wait_for(provider.get_quote(request), timeout=self.quote_timeout)
            return await provider.get_quote(request)
        except asyncio.TimeoutError:
            logger.error(f"Timed out getting quotes from {provider.name} after {self.quote_timeout}s")
            return []
        except Exception as e:
            logger.error(f"Error getting quotes from {provider.name}: {e}")
            return []

    async def get_shipping_quotes(self, request: ShipmentRequest) -> List[ShippingQuote]:
        """
        Get quotes from every provider concurrently.

        Returns:
            All quotes, sorted by price (lowest first). Overlapping service
            tiers from different carriers are all kept.
        """
        results = await asyncio.gather(
            *(self._quote_from(provider, request) for provider in self._providers),
            return_exceptions=True,
        )

        all_quotes: List[ShippingQuote] = []
        for provider, result in zip(self._providers, results):
            if isinstance(result, BaseException):
                logger.error(f"Error getting quotes from {provider.name}: {result}")
                continue
            logger.debug(f"Got {len(result)} quotes from {provider.name}")
            all_quotes.extend(result)

        all_quotes.sort(key=lambda q: q.price)
        return all_quotes

    # ==================== Shipments ====================

    async def create_shipment(
        self,
        request: ShipmentRequest,
        provider_name: Optional[str] = None,
    ) -> ShipmentRecord:
        """
        Book a shipment.

        Uses the named provider (or request.preferred_provider) when it is
        configured, otherwise the first provider. If that provider fails, one
        retry is made with the first provider whose name differs. A failure
        of the retry, or a failure with no alternative, propagates.

        Raises:
            NoProvidersAvailableError: if no providers are configured
        """
        if not self._providers:
            raise NoProvidersAvailableError("No logistics providers available")

        provider_name = provider_name or request.preferred_provider
        selected = self.get_provider(provider_name) if provider_name else None

        if selected is None:
            if provider_name:
                logger.warning(f"Requested provider {provider_name} not configured, using {self._providers[0].name}")
            selected = self._providers[0]

        try:
            result = await selected.create_shipment(request)
            return ShipmentRecord(
                tracking_number=result.tracking_number,
                provider=selected.name,
                label_url=result.label_url,
            )
        except Exception as e:
            logger.error(f"Error creating shipment with {selected.name}: {e}")

            fallback = next((p for p in self._providers if p.name != selected.name), None)
            if fallback is None:
                raise

            logger.warning(f"Retrying shipment creation with {fallback.name}")
            result = await fallback.create_shipment(request)
            return ShipmentRecord(
                tracking_number=result.tracking_number,
                provider=fallback.name,
                label_url=result.label_url,
            )

    # ==================== Tracking / Cancellation ====================

    def _require_provider(self, provider_name: str) -> LogisticsProvider:
        provider = self.get_provider(provider_name)
        if provider is None:
            raise ProviderNotFoundError(provider_name)
        return provider

    async def track_shipment(self, tracking_number: str, provider_name: str) -> TrackingInfo:
        """
        Track a shipment with the carrier that booked it.

        Events the carrier repeats in its history are returned once.

        Raises:
            ProviderNotFoundError: if provider_name is not configured
        """
        provider = self._require_provider(provider_name)
        info = await provider.track_shipment(tracking_number)

        history = merge_tracking_history([], info.history)
        if len(history) != len(info.history):
            logger.debug(f"Dropped {len(info.history) - len(history)} repeated events for {tracking_number}")
            info = replace(info, history=history)
        return info

    async def cancel_shipment(self, tracking_number: str, provider_name: str) -> bool:
        """
        Cancel a shipment with the carrier that booked it.

        Raises:
            ProviderNotFoundError: if provider_name is not configured
        """
        provider = self._require_provider(provider_name)
        return await provider.cancel_shipment(tracking_number)

    async def aclose(self) -> None:
        """Release HTTP clients held by the providers."""
        for provider in self._providers:
            close = getattr(provider, "aclose", None)
            if close is not None:
                await close()


def merge_tracking_history(
    existing: Iterable[TrackingEvent],
    incoming: Iterable[TrackingEvent],
) -> List[TrackingEvent]:
    """
    Events from incoming that are not already recorded.

    Events are identified by (timestamp, status); order of incoming is kept.
    """
    seen = {(event.timestamp, event.status) for event in existing}
    new_events = []
    for event in incoming:
        key = (event.timestamp, event.status)
        if key in seen:
            continue
        seen.add(key)
        new_events.append(event)
    return new_events
