from decimal import Decimal

import pytest

from orders.models import Order, OrderItem
from reviews.models import Review


def delivered_order(user, product, address, status='delivered'):
    order = Order.objects.create(
        user=user, subtotal=200, total_amount=200, delivery_address=address, status=status,
    )
    OrderItem.objects.create(
        order=order, product=product, product_name=product.name,
        quantity_index=0, package_index=1, quantity=1, price=200, total_price=200,
    )
    return order


@pytest.fixture
def order(user, product, address):
    return delivered_order(user, product, address)


def review_body(product, order, rating=5, message='Thick, floral and not too sweet.'):
    return {'productId': product.id, 'orderId': order.id, 'rating': rating, 'message': message}


def test_create_review_updates_product_rating(api, product, order):
    response = api.post('reviews', review_body(product, order, rating=4))

    assert response.status_code == 201
    assert response.json()['data']['isVerifiedPurchase'] is True
    product.refresh_from_db()
    assert product.rating_avg == Decimal('4.0')
    assert product.rating_count == 1


def test_rating_is_mean_of_active_reviews_rounded_to_one_decimal(product, order, user, other_user, admin_user, address):
    Review.objects.create(user=user, product=product, order=order, rating=5, message='x' * 10)
    Review.objects.create(user=other_user, product=product, order=order, rating=4, message='x' * 10)
    hidden = Review.objects.create(user=admin_user, product=product, order=order, rating=4, message='x' * 10)

    product.refresh_from_db()
    assert product.rating_avg == Decimal('4.3')
    assert product.rating_count == 3

    hidden.status = 'hidden'
    hidden.save()
    product.refresh_from_db()
    assert product.rating_avg == Decimal('4.5')
    assert product.rating_count == 2

    Review.objects.filter(status='active').delete()
    product.refresh_from_db()
    assert product.rating_avg == Decimal('0')
    assert product.rating_count == 0


def test_one_review_per_product(api, product, order):
    api.post('reviews', review_body(product, order))
    response = api.post('reviews', review_body(product, order))

    assert response.status_code == 400
    assert response.json()['message'] == 'You have already reviewed this product'


@pytest.mark.parametrize('body_update,message', [
    ({'rating': 6}, 'Rating must be between 1 and 5'),
    ({'message': 'too short'}, 'Review message must be at least 10 characters long'),
    ({'rating': None}, 'Product ID, Order ID, rating, and message are required'),
])
def test_review_validation(api, product, order, body_update, message):
    body = {**review_body(product, order), **body_update}
    response = api.post('reviews', body)
    assert response.status_code == 400
    assert response.json()['message'] == message


def test_order_must_be_delivered(api, user, product, address):
    pending = delivered_order(user, product, address, status='shipped')

    response = api.post('reviews', review_body(product, pending))

    assert response.status_code == 400
    assert response.json()['message'] == 'Order not found, not delivered, or does not belong to you'


def test_product_must_be_in_order(api, order, db):
    from catalog.models import Product

    other = Product.objects.create(name='Salt', status='active')
    response = api.post('reviews', review_body(other, order))

    assert response.json()['message'] == 'Product not found in the specified order'


def test_product_reviews_distribution(anon, product, order, user, other_user):
    Review.objects.create(user=user, product=product, order=order, rating=5, message='x' * 10)
    Review.objects.create(user=other_user, product=product, order=order, rating=2, message='y' * 10)

    data = anon.get(f'reviews/product/{product.id}', {'sort': 'lowest_rating'}).json()['data']

    assert data['ratingDistribution'] == {'1': 0, '2': 1, '3': 0, '4': 0, '5': 1}
    assert [r['rating'] for r in data['results']] == [2, 5]
    assert data['product']['ratingAvg'] == 3.5
    assert data['totalResults'] == 2


def test_admin_moderation(admin_api, product, order, user):
    review = Review.objects.create(user=user, product=product, order=order, rating=1, message='x' * 10)

    assert admin_api.patch(f'admin/reviews/{review.id}/status', {'status': 'reported'}).status_code == 200
    product.refresh_from_db()
    assert product.rating_count == 0

    assert admin_api.delete(f'admin/reviews/{review.id}').status_code == 200
    assert not Review.objects.exists()


def test_my_reviews(api, product, order, user):
    Review.objects.create(user=user, product=product, order=order, rating=3, message='x' * 10)
    data = api.get('reviews/me').json()['data']
    assert data['totalResults'] == 1
