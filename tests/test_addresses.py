from users.models import Address


def new_address(api, street, **extra):
    body = {'address': street, 'zipcode': '560001', 'city': 'Bengaluru', 'state': 'KA', **extra}
    return api.post('addresses', body)


def defaults(user):
    return list(Address.objects.filter(user=user, is_default=True).values_list('address', flat=True))


def test_address_requires_all_fields(api):
    response = api.post('addresses', {'address': '1 Main St'})
    assert response.status_code == 400
    assert response.json()['message'] == 'Address, zipcode, city, and state are required'


def test_duplicate_address_conflicts(api):
    new_address(api, '1 Main St')
    assert new_address(api, '1 Main St').status_code == 409


def test_setting_default_leaves_exactly_one(api, user):
    ids = [new_address(api, f'{n} Main St', isDefault=True).json()['data']['id'] for n in range(1, 5)]
    assert defaults(user) == ['4 Main St']

    response = api.patch(f'addresses/{ids[1]}/default')

    assert response.status_code == 200
    assert defaults(user) == ['2 Main St']


def test_deleting_default_promotes_newest(api, user):
    first  = new_address(api, '1 Main St').json()['data']['id']
    new_address(api, '2 Main St')
    third  = new_address(api, '3 Main St', isDefault=True).json()['data']['id']

    response = api.delete(f'addresses/{third}')

    assert response.status_code == 200
    assert response.json()['data']['deletedAddress']['id'] == third
    assert defaults(user) == ['2 Main St']
    assert Address.objects.filter(pk=first).exists()


def test_addresses_are_private(api, other_api, user):
    address_id = new_address(api, '1 Main St').json()['data']['id']
    assert other_api.get(f'addresses/{address_id}').status_code == 404


def test_list_puts_default_first(api):
    new_address(api, '1 Main St', isDefault=True)
    new_address(api, '2 Main St')

    results = api.get('addresses').json()['data']['results']

    assert [a['address'] for a in results] == ['1 Main St', '2 Main St']
    assert results[0]['isDefault'] is True
