"""
Canonical shipment enums shared by every carrier adapter.
"""
import enum


class ShipmentStatus(str, enum.Enum):
    """Normalized tracking status; every carrier status maps onto one of these."""
    PENDING = "pending"  # Booked, not yet collected
    PICKED_UP = "picked_up"  # Carrier has package
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    FAILED = "failed"  # Delivery attempt failed


class ItemCategory(str, enum.Enum):
    """Marketplace item categories that drive packaging policy."""
    ART = "art"
    BOOK = "book"
    FASHION = "fashion"
    OTHER = "other"
