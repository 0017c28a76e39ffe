"""
Shipping API Routes

Provides endpoints for:
- Rate quoting across all configured carriers
- Shipment creation with carrier failover
- Tracking and cancellation
- Category packaging defaults
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from logistics.api.deps import get_logistics_service
from logistics.core.exceptions import (
    CarrierAPIError,
    ProviderNotFoundError,
    ShippingError,
    ShippingValidationError,
)
from logistics.modules.shipping.packaging import packaging_defaults_for
from logistics.schemas.shipping import (
    CancelResponse,
    PackagingRequest,
    PackagingResponse,
    ProvidersResponse,
    QuoteListResponse,
    QuoteRequest,
    QuoteResponse,
    ShipmentCreate,
    ShipmentResponse,
    TrackingInfoResponse,
    TrackingResponse,
)
from logistics.services.logistics_service import LogisticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post("/quote", response_model=QuoteListResponse)
async def get_quotes(
    quote_request: QuoteRequest,
    service: LogisticsService = Depends(get_logistics_service),
):
    """
    Get shipping quotes from every configured carrier, cheapest first.

    Always includes Local Delivery quotes, even when every remote carrier fails.
    """
    try:
        request = quote_request.to_domain()
    except ShippingValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)

    quotes = await service.get_shipping_quotes(request)
    return QuoteListResponse(quotes=[QuoteResponse.model_validate(q) for q in quotes])


@router.post("/create", response_model=ShipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_shipment(
    shipment_data: ShipmentCreate,
    service: LogisticsService = Depends(get_logistics_service),
):
    """Book a shipment with the requested carrier, failing over once."""
    try:
        request = shipment_data.to_shipment_request()
    except ShippingValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)

    try:
        record = await service.create_shipment(request, shipment_data.provider_name)
    except ShippingError as e:
        logger.error(f"Failed to create shipment: {e.to_dict()}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to create shipment: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to create shipment")

    return ShipmentResponse.model_validate(record)


@router.get("/track/{tracking_number}", response_model=TrackingResponse)
async def track_shipment(
    tracking_number: str,
    provider: str = Query(..., description="Carrier that booked the shipment"),
    service: LogisticsService = Depends(get_logistics_service),
):
    """Get normalized tracking information from the owning carrier."""
    try:
        info = await service.track_shipment(tracking_number, provider)
    except ProviderNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except CarrierAPIError as e:
        logger.error(f"Tracking failed for {tracking_number}: {e.to_dict()}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return TrackingResponse(
        tracking_info=TrackingInfoResponse.model_validate(info),
        provider=provider,
    )


@router.post("/cancel/{tracking_number}", response_model=CancelResponse)
async def cancel_shipment(
    tracking_number: str,
    provider: str = Query(..., description="Carrier that booked the shipment"),
    service: LogisticsService = Depends(get_logistics_service),
):
    """Cancel a shipment with the owning carrier."""
    try:
        cancelled = await service.cancel_shipment(tracking_number, provider)
    except ProviderNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return CancelResponse(tracking_number=tracking_number, provider=provider, cancelled=cancelled)


@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(service: LogisticsService = Depends(get_logistics_service)):
    """Configured carriers, in selection order."""
    return ProvidersResponse(providers=service.get_available_providers())


@router.post("/packaging", response_model=PackagingResponse)
async def get_packaging_defaults(packaging_request: PackagingRequest):
    """Packaging defaults for an item category; 'other' keeps the given weight."""
    defaults = packaging_defaults_for(
        packaging_request.category,
        packaging_request.value,
        packaging_request.weight,
    )

    if defaults is None:
        return PackagingResponse(
            category=packaging_request.category,
            weight=packaging_request.weight,
            fragile=False,
            insurance_required=False,
            special_handling=False,
        )

    return PackagingResponse(category=packaging_request.category, **defaults.to_dict())
