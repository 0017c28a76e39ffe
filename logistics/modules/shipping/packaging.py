"""
Category packaging policy.

Pure helpers that callers apply to PackageDetails before building a
ShipmentRequest. The aggregation service never calls them; carrier pricing
depends on their output (fragile surcharge, insurance surcharge), so the
thresholds below are policy and must not drift.

| Category | Min weight | Fragile | Insurance when | Special handling when |
|----------|-----------:|---------|----------------|-----------------------|
| art      | 0.5 kg     | yes     | value > 50,000 | value > 100,000       |
| book     | 0.2 kg     | no      | value > 20,000 | never                 |
| fashion  | 0.3 kg     | no      | value > 30,000 | never                 |
"""
from dataclasses import dataclass, replace
from typing import Optional

from logistics.models.shipment import ItemCategory
from logistics.modules.shipping.types import (
    DeliveryAddress,
    PackageDetails,
    ShipmentRequest,
)

ART_MIN_WEIGHT = 0.5
ART_INSURANCE_THRESHOLD = 50000
ART_SPECIAL_HANDLING_THRESHOLD = 100000

BOOK_MIN_WEIGHT = 0.2
BOOK_INSURANCE_THRESHOLD = 20000

FASHION_MIN_WEIGHT = 0.3
FASHION_INSURANCE_THRESHOLD = 30000


@dataclass(frozen=True)
class PackagingDefaults:
    """Packaging fields a category imposes on a parcel."""
    weight: float
    fragile: bool
    insurance_required: bool
    special_handling: bool

    def to_dict(self):
        return {
            "weight": self.weight,
            "fragile": self.fragile,
            "insurance_required": self.insurance_required,
            "special_handling": self.special_handling,
        }


def calculate_art_shipping(artwork_value: float, weight: float) -> PackagingDefaults:
    """Artwork always ships as fragile; high-value pieces need special handling."""
    return PackagingDefaults(
        weight=max(weight, ART_MIN_WEIGHT),
        fragile=True,
        insurance_required=artwork_value > ART_INSURANCE_THRESHOLD,
        special_handling=artwork_value > ART_SPECIAL_HANDLING_THRESHOLD,
    )


def calculate_book_shipping(book_value: float, weight: float) -> PackagingDefaults:
    return PackagingDefaults(
        weight=max(weight, BOOK_MIN_WEIGHT),
        fragile=False,
        insurance_required=book_value > BOOK_INSURANCE_THRESHOLD,
        special_handling=False,
    )


def calculate_fashion_shipping(fashion_value: float, weight: float) -> PackagingDefaults:
    return PackagingDefaults(
        weight=max(weight, FASHION_MIN_WEIGHT),
        fragile=False,
        insurance_required=fashion_value > FASHION_INSURANCE_THRESHOLD,
        special_handling=False,
    )


_CATEGORY_POLICIES = {
    ItemCategory.ART: calculate_art_shipping,
    ItemCategory.BOOK: calculate_book_shipping,
    ItemCategory.FASHION: calculate_fashion_shipping,
}


def packaging_defaults_for(
    category: ItemCategory,
    value: float,
    weight: float,
) -> Optional[PackagingDefaults]:
    """Dispatch to the category's policy; None for categories without one."""
    policy = _CATEGORY_POLICIES.get(ItemCategory(category))
    if policy is None:
        return None
    return policy(value, weight)


def apply_packaging_defaults(package: PackageDetails) -> PackageDetails:
    """
    Return a copy of the package with its category's weight floor and
    fragility applied. A package the caller already marked fragile stays
    fragile.
    """
    defaults = packaging_defaults_for(package.category, package.value, package.weight)
    if defaults is None:
        return package

    return replace(
        package,
        weight=defaults.weight,
        fragile=package.fragile or defaults.fragile,
    )


def prepare_shipment_request(
    pickup_address: DeliveryAddress,
    delivery_address: DeliveryAddress,
    package: PackageDetails,
    preferred_provider: Optional[str] = None,
) -> ShipmentRequest:
    """Build a ShipmentRequest with category policy merged into the package."""
    defaults = packaging_defaults_for(package.category, package.value, package.weight)

    return ShipmentRequest(
        pickup_address=pickup_address,
        delivery_address=delivery_address,
        package_details=apply_packaging_defaults(package),
        preferred_provider=preferred_provider,
        insurance_required=bool(defaults and defaults.insurance_required),
    )
