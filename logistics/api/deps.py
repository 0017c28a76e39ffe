"""
API dependencies
"""
from typing import Optional

from logistics.services.logistics_service import LogisticsService

_logistics_service: Optional[LogisticsService] = None


def get_logistics_service() -> LogisticsService:
    """Process-wide LogisticsService built from settings on first use."""
    global _logistics_service
    if _logistics_service is None:
        _logistics_service = LogisticsService.from_settings()
    return _logistics_service


async def close_logistics_service() -> None:
    global _logistics_service
    if _logistics_service is not None:
        await _logistics_service.aclose()
        _logistics_service = None
