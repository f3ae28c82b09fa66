import pytest

from core.permissions import POLICY
from tests.conftest import ApiClient
from users.models import User


def as_token(client, token):
    return ApiClient(client, token)


def test_missing_token(anon, db):
    response = anon.post('auth/login')
    assert response.status_code == 400
    assert response.json() == {'status': False, 'message': 'Please authenticate'}


def test_expired_token(client, db):
    response = as_token(client, 'expired').post('auth/login')
    assert response.status_code == 401
    assert response.json()['message'] == 'Session expired'


def test_invalid_token(client, db):
    response = as_token(client, 'garbage').post('auth/login')
    assert response.status_code == 401
    assert response.json()['message'] == 'Failed to authenticate'


def test_unknown_subject_must_register(client, db):
    response = as_token(client, 'uid:stranger').post('auth/login')
    assert response.status_code == 404
    assert response.json()['message'] == "User doesn't exist. Please register."


def test_blocked_user(api, user):
    User.objects.filter(pk=user.pk).update(is_blocked=True)
    response = api.post('auth/login')
    assert response.status_code == 403
    assert response.json()['message'] == 'User is blocked'


def test_deleted_user(api, user):
    User.objects.filter(pk=user.pk).update(is_deleted=True)
    response = api.post('auth/login')
    assert response.status_code == 410


def test_login_returns_profile(api, user):
    response = api.post('auth/login')
    assert response.status_code == 200
    assert response.json()['data']['firebaseUid'] == 'alice'


def test_register_mirrors_the_firebase_account(client, db):
    response = as_token(client, 'uid:carol').post('auth/register', {'fullName': 'Carol', 'dateOfBirth': '1990-04-01'})

    assert response.status_code == 201
    carol = User.objects.get(firebase_uid='carol')
    assert carol.email == 'carol@example.com'
    assert carol.role == 'user'
    assert carol.is_email_verified
    assert carol.firebase_sign_in_provider == 'password'
    assert str(carol.date_of_birth) == '1990-04-01'


def test_register_twice_conflicts(api, user):
    response = api.post('auth/register')
    assert response.status_code == 409
    assert response.json()['message'] == 'User already exists'


def test_admin_signup_creates_admin(client, db):
    response = as_token(client, 'uid:ops').post('auth/admin-signup')
    assert response.status_code == 201
    assert User.objects.get(firebase_uid='ops').role == 'admin'


def test_user_role_is_refused_on_admin_routes(api):
    response = api.get('admin/users')
    assert response.status_code == 403
    assert response.json()['message'] == "You don't have permission"


def test_admin_can_block_user(admin_api, user):
    response = admin_api.patch(f'admin/users/{user.id}/block-status')
    assert response.status_code == 200
    user.refresh_from_db()
    assert user.is_blocked


def test_soft_delete_other_user_is_refused(api, other_user):
    response = api.post(f'users/{other_user.id}/soft-delete')
    assert response.status_code == 401


def test_soft_delete_self(api, user):
    response = api.post(f'users/{user.id}/soft-delete')
    assert response.status_code == 200
    user.refresh_from_db()
    assert user.is_deleted


@pytest.mark.parametrize('key', sorted(POLICY))
def test_every_policy_entry_names_known_roles(key):
    assert POLICY[key] <= {'user', 'admin'}
