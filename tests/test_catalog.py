import json

from catalog.models import Product, ProductCategory


def tiers(**package):
    return [{'quantity': '1 kg', 'packages': [{'name': 'Jar', **package}]}]


def test_create_product_derives_sell_price(admin_api):
    category = ProductCategory.objects.create(name='Honey', description='Raw honey')

    response = admin_api.post('products', {
        'name':            '  Forest Honey ',
        'categories':      [category.id],
        'quantityDetails': tiers(basePrice=450, discountType='percentage', discountAmount=10),
        'metadata':        [{'title': 'Origin', 'description': 'Nilgiris', 'order': 2},
                            {'title': 'Shelf life', 'description': '2 years', 'order': 1}],
    })

    assert response.status_code == 201
    data = response.json()['data']
    assert data['name'] == 'Forest Honey'
    assert data['quantityDetails'][0]['packages'][0] == {
        'name': 'Jar', 'basePrice': 450, 'sellPrice': 405, 'discountType': 'percent', 'discountAmount': 10,
    }
    assert [m['title'] for m in data['metadata']] == ['Shelf life', 'Origin']
    assert data['categories'][0]['id'] == category.id


def test_create_accepts_json_encoded_form_fields(admin_api):
    response = admin_api.upload('products', {
        'name':            'Comb Honey',
        'quantityDetails': json.dumps(tiers(price=300, discountValue=50)),
    })

    assert response.status_code == 201
    package = response.json()['data']['quantityDetails'][0]['packages'][0]
    assert (package['basePrice'], package['sellPrice']) == (300, 250)


def test_sell_price_above_base_rejected(admin_api):
    response = admin_api.post('products', {'name': 'Bad', 'quantityDetails': tiers(basePrice=100, sellPrice=120)})

    assert response.status_code == 400
    assert response.json()['message'] == 'sellPrice cannot exceed basePrice'
    assert not Product.objects.exists()


def test_unknown_category_rejected(admin_api):
    response = admin_api.post('products', {'name': 'Bad', 'categories': [999]})
    assert response.status_code == 400


def test_products_are_admin_writable_public_readable(api, anon, product):
    assert api.post('products', {'name': 'Nope'}).status_code == 403
    listing = anon.get('products').json()['data']
    assert listing['totalResults'] == 1


def test_toggle_status(admin_api, product):
    response = admin_api.patch(f'products/{product.id}/toggle-status')
    assert response.json()['data']['status'] == 'inactive'
    product.refresh_from_db()
    assert product.status == 'inactive'


def test_delete_product_discards_media(admin_api, product, r2_client):
    product.images = ['https://cdn.example.com/test-bucket/products/images/1.png']
    product.save()

    response = admin_api.delete(f'products/{product.id}')

    assert response.status_code == 200
    r2_client.delete_object.assert_called_once_with(Bucket='test-bucket', Key='products/images/1.png')
