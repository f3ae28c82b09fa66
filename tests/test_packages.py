import pytest

from catalog.packages import normalize_package, normalize_quantity_details, resolve_package
from core.exceptions import ApiError

TIERS = [
    {'quantity': '250 g', 'packages': [
        {'name': 'Pouch', 'basePrice': 120, 'sellPrice': 100},
        {'name': 'Jar', 'basePrice': 150, 'sellPrice': 140},
    ]},
    {'quantity': '1 kg', 'packages': [
        {'name': 'Tub', 'price': 500, 'sellingPrice': 450},
    ]},
]


class TestResolvePackage:

    def test_exact(self):
        result = resolve_package(TIERS, 0, 1)
        assert result['matchReason'] == 'exact'
        assert result['package']['name'] == 'Jar'
        assert result['quantityLabel'] == '250 g'

    def test_package_clamped_within_valid_tier(self):
        result = resolve_package(TIERS, 1, 4)
        assert result['matchReason'] == 'package_clamped'
        assert (result['quantityIndex'], result['packageIndex']) == (1, 0)

    def test_price_match_uses_total_over_quantity(self):
        result = resolve_package(TIERS, 7, 0, price=999, total_price=900, quantity=2)
        assert result['matchReason'] == 'price_match'
        assert result['package']['name'] == 'Tub'
        assert (result['quantityIndex'], result['packageIndex']) == (1, 0)

    def test_price_match_falls_back_to_price_when_quantity_is_zero(self):
        result = resolve_package(TIERS, 7, 0, price=140, total_price=0, quantity=0)
        assert result['matchReason'] == 'price_match'
        assert result['package']['name'] == 'Jar'

    def test_price_match_accepts_base_price(self):
        result = resolve_package(TIERS, 7, 0, price=120)
        assert result['matchReason'] == 'price_match'
        assert result['package']['name'] == 'Pouch'

    def test_price_match_tolerance(self):
        assert resolve_package(TIERS, 9, 9, price=100.01)['matchReason'] == 'price_match'
        assert resolve_package(TIERS, 9, 9, price=100.02)['matchReason'] == 'first_available'

    def test_first_available(self):
        result = resolve_package(TIERS, 9, 9, price=1)
        assert result['matchReason'] == 'first_available'
        assert result['package']['name'] == 'Pouch'

    def test_placeholder_when_nothing_to_match(self):
        result = resolve_package([], 0, 0, price=75)
        assert result['matchReason'] == 'placeholder'
        assert result['package']['sellPrice'] == 75
        assert result['quantityLabel'] is None

    def test_empty_tiers_are_skipped(self):
        tiers = [{'quantity': 'x', 'packages': []}] + TIERS
        result = resolve_package(tiers, 5, 5)
        assert result['matchReason'] == 'first_available'
        assert result['quantityIndex'] == 1


class TestNormalizePackage:

    def test_flat_discount_derives_sell_price(self):
        package = normalize_package({'name': 'Box', 'basePrice': 250, 'discountType': 'flat', 'discountAmount': 50})
        assert package['sellPrice'] == 200

    def test_percentage_alias(self):
        package = normalize_package({'basePrice': 450, 'discountType': 'percentage', 'discountAmount': 10})
        assert package['discountType'] == 'percent'
        assert package['sellPrice'] == 405

    def test_legacy_field_names_are_read(self):
        package = normalize_package({'price': 300, 'sellingPrice': 280})
        assert package['basePrice'] == 300
        assert package['sellPrice'] == 280

    def test_sell_price_above_base_is_rejected(self):
        with pytest.raises(ApiError) as excinfo:
            normalize_package({'basePrice': 100, 'sellPrice': 120})
        assert excinfo.value.status_code == 400

    def test_tier_needs_a_label(self):
        with pytest.raises(ApiError):
            normalize_quantity_details([{'packages': []}])
