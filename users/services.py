# users/services.py
"""
Firebase Identity Toolkit REST calls that firebase_admin does not cover.
"""

import logging

import requests
from django.conf import settings

from core import auth as firebase

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    pass


class IdentityToolkitService:

    VERIFY_CUSTOM_TOKEN_URL = 'https://www.googleapis.com/identitytoolkit/v3/relyingparty/verifyCustomToken'
    SEND_OOB_CODE_URL       = 'https://identitytoolkit.googleapis.com/v1/accounts:sendOobCode'
    TIMEOUT                 = 10

    @classmethod
    def _post(cls, url, payload):
        try:
            response = requests.post(
                url,
                params={'key': settings.FIREBASE_API_KEY},
                json=payload,
                timeout=cls.TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"Identity toolkit request failed: {e}", exc_info=True)
            raise IdentityProviderError(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = (data.get('error') or {}).get('message') or f"HTTP {response.status_code}"
            logger.warning(f"Identity toolkit returned {response.status_code}: {message}")
            raise IdentityProviderError(message)
        return data

    @classmethod
    def exchange_custom_token(cls, uid):
        """Mint a custom token for uid and trade it for an ID token."""
        custom_token = firebase.create_custom_token(uid)
        data = cls._post(cls.VERIFY_CUSTOM_TOKEN_URL, {
            'token':             custom_token,
            'returnSecureToken': True,
        })
        return {'customToken': custom_token, 'idToken': data.get('idToken')}

    @classmethod
    def send_password_reset(cls, email):
        return cls._post(cls.SEND_OOB_CODE_URL, {
            'requestType': 'PASSWORD_RESET',
            'email':       email,
        })
