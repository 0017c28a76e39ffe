"""
Shipping Module

- Carrier-agnostic data classes (types)
- LogisticsProvider interface and carrier registry (carriers)
- Category packaging policy (packaging)
"""
from logistics.modules.shipping.carriers import build_providers, get_registered_carriers
from logistics.modules.shipping.carriers.base import LogisticsProvider

__all__ = [
    "build_providers",
    "get_registered_carriers",
    "LogisticsProvider",
]
