from decimal import Decimal

import pytest

from promotions.models import Coupon
from promotions.services import compute_discount, round_total, validate_coupon


@pytest.fixture
def coupon(db):
    return Coupon.objects.create(
        code=' save10 ', discount_type='percent', discount_value=10, max_discount=100, min_order_value=100,
    )


def test_code_is_stored_trimmed_and_uppercased(coupon):
    coupon.refresh_from_db()
    assert coupon.code == 'SAVE10'


@pytest.mark.parametrize('discount_type,value,cap,subtotal,expected', [
    ('percent', 10, 100, 600, '60.00'),
    ('percent', 10, 50, 600, '50.00'),
    ('flat', 75, 500, 600, '75.00'),
    ('flat', 75, 40, 600, '40.00'),
    ('percent', 15, 1000, '99.99', '15.00'),
])
def test_compute_discount(discount_type, value, cap, subtotal, expected):
    coupon = Coupon(discount_type=discount_type, discount_value=Decimal(value), max_discount=Decimal(cap))
    assert compute_discount(coupon, Decimal(subtotal)) == Decimal(expected)


def test_round_total_half_up():
    assert round_total(Decimal('100.50'), Decimal('0')) == Decimal('101')
    assert round_total(Decimal('600'), Decimal('60.00')) == Decimal('540')


def test_validate_coupon_case_insensitive(coupon):
    result = validate_coupon('Save10', Decimal('600'))
    assert result['valid']
    assert result['discount_amount'] == Decimal('60.00')


def test_validate_coupon_minimum_order(coupon):
    result = validate_coupon('SAVE10', Decimal('99'))
    assert not result['valid']
    assert result['error'] == 'Minimum order value should be ₹100 to use this coupon'
    assert result['min_order_value'] == Decimal('100')


# ─── apply-coupon preview ───

def test_apply_coupon_preview(api, coupon):
    response = api.post('orders/apply-coupon', {'couponCode': 'save10', 'subtotal': 600})

    assert response.status_code == 200
    body = response.json()
    assert body['discountAmount'] == 60
    assert body['totalAmount'] == 540
    assert body['coupon']['code'] == 'SAVE10'
    coupon.refresh_from_db()
    assert coupon.usage_count == 0


def test_apply_coupon_below_minimum_reports_floor(api, coupon):
    response = api.post('orders/apply-coupon', {'couponCode': 'SAVE10', 'subtotal': 50})

    assert response.status_code == 400
    assert response.json() == {
        'error': 'Minimum order value should be ₹100 to use this coupon',
        'minOrderValue': 100,
    }


def test_apply_coupon_requires_fields(api, db):
    response = api.post('orders/apply-coupon', {'couponCode': 'SAVE10'})
    assert response.status_code == 400
    assert response.json() == {'error': 'Coupon code and subtotal are required'}


# ─── admin ───

def test_admin_creates_coupon(admin_api):
    response = admin_api.post('admin/coupons', {
        'code': 'welcome', 'discountType': 'flat', 'discountValue': 50, 'maxDiscount': 50, 'minOrderValue': 200,
    })

    assert response.status_code == 201
    assert response.json()['data']['code'] == 'WELCOME'


def test_duplicate_coupon_code_conflicts(admin_api, coupon):
    response = admin_api.post('admin/coupons', {
        'code': 'Save10', 'discountType': 'flat', 'discountValue': 5, 'maxDiscount': 5, 'minOrderValue': 0,
    })
    assert response.status_code == 409


def test_usage_count_is_not_editable(admin_api, coupon):
    admin_api.patch(f'admin/coupons/{coupon.id}', {'usageCount': 99, 'maxDiscount': 80})

    coupon.refresh_from_db()
    assert coupon.usage_count == 0
    assert coupon.max_discount == Decimal('80')


def test_public_list_shows_active_only(anon, coupon):
    Coupon.objects.create(code='OLD', discount_type='flat', discount_value=1, max_discount=1, min_order_value=0, status='inactive')

    body = anon.get('coupons').json()

    assert [c['code'] for c in body['data']['results']] == ['SAVE10']


def test_toggle_status(admin_api, coupon):
    response = admin_api.patch(f'admin/coupons/{coupon.id}/toggle-status')
    assert response.json()['message'] == 'Coupon is now inactive'


def test_users_cannot_manage_coupons(api, coupon):
    assert api.get('admin/coupons').status_code == 403


@pytest.mark.parametrize('subtotal', ['NaN', 'sNaN', 'Infinity', '-Infinity', 'abc'])
def test_apply_coupon_rejects_non_numeric_subtotal(api, coupon, subtotal):
    response = api.post('orders/apply-coupon', {'couponCode': 'SAVE10', 'subtotal': subtotal})

    assert response.status_code == 400
    assert response.json() == {'error': 'Subtotal must be a number'}


def test_apply_coupon_preview_reports_raw_total_when_discount_exceeds_subtotal(api, db):
    Coupon.objects.create(code='BIG', discount_type='flat', discount_value=1000, max_discount=1000, min_order_value=0)

    response = api.post('orders/apply-coupon', {'couponCode': 'BIG', 'subtotal': 600})

    assert response.status_code == 200
    assert response.json()['discountAmount'] == 1000
    assert response.json()['totalAmount'] == -400
