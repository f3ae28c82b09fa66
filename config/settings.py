# config/settings.py
"""
Django settings.

Every variable in REQUIRED_ENV must be present (process env or .env file);
startup aborts otherwise.
"""

import os
from pathlib import Path

import dj_database_url
from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


REQUIRED_ENV = [
    'DJANGO_SECRET_KEY',
    'DATABASE_URL',
    'R2_BUCKET_NAME',
    'R2_ENDPOINT',
    'R2_ACCESS_KEY_ID',
    'R2_SECRET_ACCESS_KEY',
    'R2_PUBLIC_BASE_URL',
    'FIREBASE_PROJECT_ID',
    'FIREBASE_PRIVATE_KEY',
    'FIREBASE_CLIENT_EMAIL',
    'FIREBASE_API_KEY',
    'RAZORPAY_KEY_ID',
    'RAZORPAY_KEY_SECRET',
]

_missing = [name for name in REQUIRED_ENV if not os.environ.get(name)]
if _missing:
    raise ImproperlyConfigured(
        f"Config validation error: missing required environment variables: {', '.join(_missing)}"
    )


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def parse_private_key(raw):
    """Strip surrounding quotes and expand literal \\n escapes."""
    key = raw.strip().strip('"').strip("'")
    return key.replace('\\n', '\n')


# ── Core ──────────────────────────────────────────────────────
ENVIRONMENT = os.environ.get('DJANGO_ENV', 'development')
SECRET_KEY  = os.environ['DJANGO_SECRET_KEY']
DEBUG       = env_bool('DJANGO_DEBUG', ENVIRONMENT == 'development')

ALLOWED_HOSTS = [h.strip() for h in os.environ.get('ALLOWED_HOSTS', '*').split(',') if h.strip()]

INSTALLED_APPS = [
    'unfold',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'core',
    'users',
    'content',
    'catalog',
    'cart',
    'wishlist',
    'promotions',
    'orders.apps.OrdersConfig',
    'reviews.apps.ReviewsConfig',
    'adminpanel',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'core.middleware.ApiExceptionMiddleware',
]

ROOT_URLCONF    = 'config.urls'
WSGI_APPLICATION = 'config.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

DATABASES = {
    'default': dj_database_url.parse(os.environ['DATABASE_URL'], conn_max_age=600),
}

AUTH_USER_MODEL    = 'users.User'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE     = 'UTC'
USE_I18N      = True
USE_TZ        = True

STATIC_URL  = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Request bodies carry base64-free multipart uploads up to UPLOAD_MAX_BYTES.
UPLOAD_MAX_BYTES            = int(os.environ.get('UPLOAD_MAX_BYTES', 100 * 1024 * 1024))
DATA_UPLOAD_MAX_MEMORY_SIZE = UPLOAD_MAX_BYTES
FILE_UPLOAD_MAX_MEMORY_SIZE = UPLOAD_MAX_BYTES


# ── Object storage (Cloudflare R2) ────────────────────────────
R2_BUCKET_NAME       = os.environ['R2_BUCKET_NAME']
R2_ENDPOINT          = os.environ['R2_ENDPOINT']
R2_ACCESS_KEY_ID     = os.environ['R2_ACCESS_KEY_ID']
R2_SECRET_ACCESS_KEY = os.environ['R2_SECRET_ACCESS_KEY']
R2_PUBLIC_BASE_URL   = os.environ['R2_PUBLIC_BASE_URL'].rstrip('/')


# ── Identity provider (Firebase) ──────────────────────────────
FIREBASE_API_KEY     = os.environ['FIREBASE_API_KEY']
FIREBASE_CREDENTIALS = {
    'type':           'service_account',
    'project_id':     os.environ['FIREBASE_PROJECT_ID'],
    'private_key_id': os.environ.get('FIREBASE_PRIVATE_KEY_ID', ''),
    'private_key':    parse_private_key(os.environ['FIREBASE_PRIVATE_KEY']),
    'client_email':   os.environ['FIREBASE_CLIENT_EMAIL'],
    'client_id':      os.environ.get('FIREBASE_CLIENT_ID', ''),
    'token_uri':      os.environ.get('FIREBASE_TOKEN_URI', 'https://oauth2.googleapis.com/token'),
}


# ── Payment gateway (Razorpay) ────────────────────────────────
RAZORPAY_KEY_ID     = os.environ['RAZORPAY_KEY_ID']
RAZORPAY_KEY_SECRET = os.environ['RAZORPAY_KEY_SECRET']
PAYMENT_CURRENCY    = os.environ.get('PAYMENT_CURRENCY', 'INR')


# ── Logging ───────────────────────────────────────────────────
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}


# ── Admin (unfold) ────────────────────────────────────────────
UNFOLD = {
    'SITE_TITLE':  'Blog & Store Admin',
    'SITE_HEADER': 'Blog & Store',
    'DASHBOARD_CALLBACK': 'catalog.admin.dashboard_callback',
}
