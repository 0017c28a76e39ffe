from logistics.models.shipment import ItemCategory, ShipmentStatus

__all__ = ["ItemCategory", "ShipmentStatus"]
