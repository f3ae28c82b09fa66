# core/firebase.py
import firebase_admin
from firebase_admin import credentials
from django.conf import settings

_app = None


def get_app():
    """The firebase_admin app, initialised on first use from settings."""
    global _app
    if _app is None:
        try:
            _app = firebase_admin.get_app()
        except ValueError:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
            _app = firebase_admin.initialize_app(cred)
    return _app
