import json
from unittest import mock

import pytest
from firebase_admin import auth as firebase_auth_api

from catalog.models import Product
from orders.payment_services import RazorpayPaymentService
from users.models import Address, User

API = '/api/v1/'


def claims_for(uid):
    return {
        'uid':            uid,
        'email':          f'{uid}@example.com',
        'email_verified': True,
        'firebase':       {'sign_in_provider': 'password'},
    }


@pytest.fixture(autouse=True)
def firebase_tokens(monkeypatch):
    """Bearer tokens of the form 'uid:<uid>' verify; 'expired' has expired."""
    def verify(token):
        if token == 'expired':
            raise firebase_auth_api.ExpiredIdTokenError('Token expired', None)
        if token.startswith('uid:'):
            return claims_for(token[4:])
        raise ValueError('Invalid token')

    monkeypatch.setattr('core.auth.verify_id_token', verify)


@pytest.fixture(autouse=True)
def r2_client(monkeypatch):
    client = mock.MagicMock()
    monkeypatch.setattr('core.storage.get_client', lambda: client)
    return client


@pytest.fixture(autouse=True)
def gateway(monkeypatch):
    create_order = mock.MagicMock(return_value='order_rzp_test_1')
    monkeypatch.setattr(RazorpayPaymentService, 'create_order', create_order)
    return create_order


class ApiClient:
    """Thin JSON wrapper over the Django test client."""

    def __init__(self, client, token=None):
        self.client = client
        self.token  = token

    def _headers(self):
        return {'HTTP_AUTHORIZATION': f'Bearer {self.token}'} if self.token else {}

    def get(self, path, params=None):
        return self.client.get(API + path, params or {}, **self._headers())

    def _send(self, method, path, data):
        return getattr(self.client, method)(
            API + path,
            data=json.dumps(data if data is not None else {}),
            content_type='application/json',
            **self._headers()
        )

    def post(self, path, data=None):
        return self._send('post', path, data)

    def patch(self, path, data=None):
        return self._send('patch', path, data)

    def put(self, path, data=None):
        return self._send('put', path, data)

    def delete(self, path):
        return self.client.delete(API + path, **self._headers())

    def upload(self, path, data):
        return self.client.post(API + path, data, **self._headers())


@pytest.fixture
def user(db):
    return User.objects.create_from_claims(claims_for('alice'), full_name='Alice')


@pytest.fixture
def other_user(db):
    return User.objects.create_from_claims(claims_for('bob'), full_name='Bob')


@pytest.fixture
def admin_user(db):
    return User.objects.create_from_claims(claims_for('root'), role='admin', full_name='Root')


@pytest.fixture
def anon(client):
    return ApiClient(client)


@pytest.fixture
def api(client, user):
    return ApiClient(client, f'uid:{user.firebase_uid}')


@pytest.fixture
def admin_api(client, admin_user):
    return ApiClient(client, f'uid:{admin_user.firebase_uid}')


@pytest.fixture
def address(user):
    return Address.objects.create(
        user=user, address='12 MG Road', zipcode='560001', city='Bengaluru', state='KA', is_default=True,
    )


HONEY_TIERS = [
    {
        'quantity': '500 g',
        'packages': [
            {'name': 'Jar', 'basePrice': 250, 'sellPrice': 250, 'discountType': 'flat', 'discountAmount': 0},
            {'name': 'Box', 'basePrice': 250, 'sellPrice': 200, 'discountType': 'flat', 'discountAmount': 50},
        ],
    },
    {
        'quantity': '1 kg',
        'packages': [
            {'name': 'Jar', 'basePrice': 450, 'sellPrice': 405, 'discountType': 'percent', 'discountAmount': 10},
        ],
    },
]


@pytest.fixture
def product(db):
    return Product.objects.create(name='Wild Honey', quantity_details=HONEY_TIERS, status='active', is_published=True)


@pytest.fixture
def other_api(client, other_user):
    return ApiClient(client, f'uid:{other_user.firebase_uid}')
