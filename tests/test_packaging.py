"""
Tests for category packaging policy.
"""
import pytest

from logistics.core.exceptions import ShippingValidationError
from logistics.models.shipment import ItemCategory
from logistics.modules.shipping.packaging import (
    apply_packaging_defaults,
    calculate_art_shipping,
    calculate_book_shipping,
    calculate_fashion_shipping,
    packaging_defaults_for,
    prepare_shipment_request,
)
from logistics.modules.shipping.types import PackageDetails


def _package(**overrides):
    fields = dict(weight=0.1, length=20, width=15, height=2, value=1000, category=ItemCategory.OTHER)
    fields.update(overrides)
    return PackageDetails(**fields)


class TestArtShipping:
    """Test artwork packaging rules."""

    def test_weight_floor_and_fragile(self):
        """Test light artwork is raised to 0.5kg and always fragile."""
        defaults = calculate_art_shipping(artwork_value=60000, weight=0.1)

        assert defaults.weight == 0.5
        assert defaults.fragile is True
        assert defaults.insurance_required is True
        assert defaults.special_handling is False

    def test_high_value_needs_special_handling(self):
        defaults = calculate_art_shipping(artwork_value=150000, weight=0.1)

        assert defaults.special_handling is True
        assert defaults.insurance_required is True

    def test_thresholds_are_exclusive(self):
        """Test values exactly at a threshold do not trigger it."""
        assert calculate_art_shipping(50000, 1.0).insurance_required is False
        assert calculate_art_shipping(100000, 1.0).special_handling is False

    def test_heavier_weight_kept(self):
        assert calculate_art_shipping(1000, 3.2).weight == 3.2


class TestBookAndFashionShipping:
    """Test book and fashion packaging rules."""

    def test_book_rules(self):
        defaults = calculate_book_shipping(book_value=25000, weight=0.1)

        assert defaults.weight == 0.2
        assert defaults.fragile is False
        assert defaults.insurance_required is True
        assert defaults.special_handling is False

    def test_book_below_insurance_threshold(self):
        assert calculate_book_shipping(20000, 1.0).insurance_required is False

    def test_fashion_rules(self):
        defaults = calculate_fashion_shipping(fashion_value=30001, weight=0.1)

        assert defaults.weight == 0.3
        assert defaults.fragile is False
        assert defaults.insurance_required is True

    def test_fashion_below_insurance_threshold(self):
        assert calculate_fashion_shipping(30000, 1.0).insurance_required is False


class TestPackagingDispatch:
    """Test category dispatch and application to packages."""

    def test_dispatch_by_category(self):
        assert packaging_defaults_for(ItemCategory.BOOK, 100, 0.1).weight == 0.2
        assert packaging_defaults_for("fashion", 100, 0.1).weight == 0.3

    def test_other_has_no_policy(self):
        assert packaging_defaults_for(ItemCategory.OTHER, 100000, 0.1) is None

    def test_apply_to_art_package(self):
        """Test art packages get the weight floor and become fragile."""
        package = _package(category=ItemCategory.ART)

        adjusted = apply_packaging_defaults(package)

        assert adjusted.weight == 0.5
        assert adjusted.fragile is True
        assert package.weight == 0.1

    def test_apply_keeps_caller_fragility(self):
        """Test a fragile book stays fragile."""
        adjusted = apply_packaging_defaults(_package(category=ItemCategory.BOOK, fragile=True))

        assert adjusted.fragile is True
        assert adjusted.weight == 0.2

    def test_apply_other_unchanged(self):
        package = _package()
        assert apply_packaging_defaults(package) is package

    def test_prepare_shipment_request_sets_insurance(self, pickup_address):
        """Test the request carries the category's insurance decision."""
        request = prepare_shipment_request(
            pickup_address,
            pickup_address,
            _package(category=ItemCategory.ART, value=75000),
            preferred_provider="Sendbox",
        )

        assert request.insurance_required is True
        assert request.package_details.fragile is True
        assert request.package_details.weight == 0.5
        assert request.preferred_provider == "Sendbox"

    def test_prepare_shipment_request_other_category(self, pickup_address):
        request = prepare_shipment_request(pickup_address, pickup_address, _package(value=999999))

        assert request.insurance_required is False


class TestPackageValidation:
    """Test PackageDetails construction checks."""

    @pytest.mark.parametrize("field_name", ["weight", "length", "width", "height"])
    def test_non_positive_dimensions_rejected(self, field_name):
        with pytest.raises(ShippingValidationError) as exc_info:
            _package(**{field_name: 0})

        assert exc_info.value.details["field"] == field_name

    def test_negative_value_rejected(self):
        with pytest.raises(ShippingValidationError):
            _package(value=-1)

    def test_category_string_coerced(self):
        assert _package(category="book").category is ItemCategory.BOOK

    def test_unknown_category_rejected(self):
        with pytest.raises(ShippingValidationError):
            _package(category="furniture")
