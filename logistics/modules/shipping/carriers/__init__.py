"""
Carrier Registry and Factory

- Remote carriers register themselves under a configuration key
- build_providers() instantiates each registered carrier whose credential is
  present, in registration order, and always appends Local Delivery last
- A missing credential means the carrier is not offered; it is not an error
"""
from typing import Callable, Dict, List, Mapping, Optional, Type
import logging

import httpx

from logistics.modules.shipping.carriers.base import (
    DEFAULT_TIMEOUT_SECONDS,
    LogisticsProvider,
)

logger = logging.getLogger(__name__)

# Registry of remote carrier implementations; dict order is registration order
_CARRIER_REGISTRY: Dict[str, Type] = {}


def register_carrier(carrier_key: str) -> Callable[[Type], Type]:
    """
    Decorator to register a remote carrier implementation.

    Usage:
        @register_carrier("sendbox")
        class SendboxCarrier:
            ...
    """
    def decorator(cls: Type) -> Type:
        _CARRIER_REGISTRY[carrier_key] = cls
        logger.debug(f"Registered carrier: {carrier_key} -> {cls.__name__}")
        return cls
    return decorator


def get_registered_carriers() -> List[str]:
    """Get list of all registered carrier keys."""
    return list(_CARRIER_REGISTRY.keys())


def build_providers(
    credentials: Mapping[str, Optional[str]],
    base_urls: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[LogisticsProvider]:
    """
    Build the ordered provider list from a {carrier_key: credential} mapping.

    Args:
        credentials: API key per carrier key; None or "" skips the carrier
        base_urls: Optional base URL override per carrier key
        timeout: Per-request HTTP timeout for remote carriers
        transport: Optional httpx transport shared by remote carriers (tests)

    Returns:
        Remote carriers with credentials, followed by Local Delivery
    """
    for key in credentials:
        if key not in _CARRIER_REGISTRY:
            logger.warning(f"Ignoring credential for unregistered carrier: {key}")

    providers: List[LogisticsProvider] = []

    for key, carrier_cls in _CARRIER_REGISTRY.items():
        api_key = credentials.get(key)
        if not api_key:
            logger.debug(f"Carrier {key} has no credential, skipping")
            continue

        kwargs = {"timeout": timeout, "transport": transport}
        if base_urls and base_urls.get(key):
            kwargs["base_url"] = base_urls[key]

        provider = carrier_cls(api_key, **kwargs)
        providers.append(provider)
        logger.info(f"Enabled carrier: {provider.name}")

    providers.append(LocalDeliveryCarrier())
    return providers


# Import carriers to trigger registration
# These imports must be at the bottom to avoid circular imports
from logistics.modules.shipping.carriers.sendbox import SendboxCarrier  # noqa: E402, F401
from logistics.modules.shipping.carriers.gig import GIGCarrier  # noqa: E402, F401
from logistics.modules.shipping.carriers.local import LocalDeliveryCarrier  # noqa: E402
