from cart.models import CartItem
from catalog.models import Product


def upsert(api, product, quantity, qi=0, pi=1):
    return api.post('cart/items', {'productId': product.id, 'quantityIndex': qi, 'packageIndex': pi, 'quantity': quantity})


# ─── cart ───

def test_first_item_creates_cart(api, product):
    response = upsert(api, product, 2)

    assert response.status_code == 200
    body = response.json()
    assert body['message'] == 'Cart created'
    line = body['data']['items'][0]
    assert line['quantity'] == 2
    assert line['package']['name'] == 'Box'
    assert line['lineTotal'] == 400
    assert body['data']['subtotal'] == 400


def test_upsert_sets_quantity_and_appends(api, product):
    upsert(api, product, 2)
    response = upsert(api, product, 5)
    assert response.json()['message'] == 'Cart updated'
    assert CartItem.objects.get().quantity == 5

    upsert(api, product, 1, qi=1, pi=0)
    assert CartItem.objects.count() == 2


def test_zero_quantity_removes_line(api, product):
    upsert(api, product, 2)
    response = upsert(api, product, 0)

    assert response.json()['message'] == 'Item removed'
    assert not CartItem.objects.exists()


def test_zero_quantity_without_cart(api, product):
    response = upsert(api, product, 0)
    assert response.json()['message'] == 'Nothing to remove'


def test_all_fields_required(api, product):
    response = api.post('cart/items', {'productId': product.id, 'quantity': 1})
    assert response.status_code == 400
    assert response.json()['message'] == 'All fields are required'


def test_get_cart(api, product):
    assert api.get('cart').status_code == 404
    upsert(api, product, 3)

    data = api.get('cart').json()['data']

    assert data['totalItems'] == 3
    assert data['items'][0]['product']['name'] == 'Wild Honey'


# ─── wishlist ───

def test_wishlist_toggle(api, product):
    assert api.get('wishlist').status_code == 404

    added = api.post('wishlist/toggle', {'productId': product.id})
    assert added.json()['message'] == 'Added to wishlist'
    assert len(api.get('wishlist').json()['data']['items']) == 1

    removed = api.post('wishlist/toggle', {'productId': product.id})
    assert removed.json()['message'] == 'Removed from wishlist'
    assert api.get('wishlist').json()['data']['items'] == []


def test_wishlist_requires_product_id(api):
    response = api.post('wishlist/toggle', {})
    assert response.status_code == 400
    assert response.json()['message'] == 'Product ID is required'


def test_wishlist_lists_items_in_the_order_added(api, product):
    second = Product.objects.create(name='Beeswax', quantity_details=[], status='active')
    api.post('wishlist/toggle', {'productId': second.id})
    api.post('wishlist/toggle', {'productId': product.id})

    items = api.get('wishlist').json()['data']['items']

    assert [item['product']['name'] for item in items] == ['Beeswax', 'Wild Honey']
    assert all(item['createdAt'] for item in items)


def test_deleting_a_product_drops_it_from_wishlists(api, product):
    api.post('wishlist/toggle', {'productId': product.id})
    product.delete()

    assert api.get('wishlist').json()['data']['items'] == []
