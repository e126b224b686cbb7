"""
PDSCC Configuration
Reads every recognised environment variable into a flat settings mapping
that the application factory loads into Flask's app.config.

Missing credentials are left as None; the feature that needs them reports
"not configured" at request time instead of failing at startup.
"""

import os
import json
import base64
import binascii
import logging

logger = logging.getLogger(__name__)

DEFAULT_SITE_BASE_URL = 'https://www.azpdscc.org'


def _normalize_url(value):
    """Strip trailing slash while keeping scheme/host"""
    if not value:
        return ''
    return value.rstrip('/')


def _split_env_list(value):
    """Split comma-separated env values into a cleaned list"""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def _env_bool(name, default='false'):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


def decode_service_account(value):
    """
    Decode the base64-encoded service account JSON.

    Returns:
        dict or None: Parsed credential, or None when unset or unreadable
    """
    if not value:
        return None
    try:
        decoded = base64.b64decode(value).decode('utf-8')
        return json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"FIREBASE_SERVICE_ACCOUNT could not be decoded: {e}")
        return None


def load_settings() -> dict:
    """Build the settings mapping from the current environment"""
    service_account = decode_service_account(os.environ.get('FIREBASE_SERVICE_ACCOUNT'))
    project_id = os.environ.get('FIREBASE_PROJECT_ID') or (service_account or {}).get('project_id')

    try:
        openai_timeout = float(os.environ.get('OPENAI_TIMEOUT', '60'))
    except ValueError:
        openai_timeout = 60.0

    return {
        'DEBUG': _env_bool('DEBUG'),
        'PORT': int(os.environ.get('PORT', 5000)),
        'DATABASE_URL': os.environ.get('DATABASE_URL', 'sqlite:///pdscc.db'),
        'SITE_BASE_URL': _normalize_url(os.environ.get('SITE_BASE_URL', DEFAULT_SITE_BASE_URL)),
        'CORS_ORIGINS': [_normalize_url(o) for o in _split_env_list(os.environ.get('CORS_ORIGINS', ''))],
        'SEED_TEAM': _env_bool('SEED_TEAM', 'true'),

        # Shared secrets
        'ADMIN_API_KEY': os.environ.get('ADMIN_API_KEY'),
        'CRON_SECRET': os.environ.get('CRON_SECRET'),
        'JWT_SECRET_KEY': os.environ.get('JWT_SECRET_KEY'),

        # Identity provider
        'FIREBASE_SERVICE_ACCOUNT': service_account,
        'FIREBASE_PROJECT_ID': project_id,
        'ID_TOKEN_SECRET': os.environ.get('ID_TOKEN_SECRET'),
        'ID_TOKEN_JWKS_URL': os.environ.get(
            'ID_TOKEN_JWKS_URL',
            'https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com'
        ),

        # Staff logins
        'VOLUNTEER_USERNAME': os.environ.get('VOLUNTEER_USERNAME'),
        'VOLUNTEER_PASSWORD': os.environ.get('VOLUNTEER_PASSWORD'),
        'PERFORMER_USERNAME': os.environ.get('PERFORMER_USERNAME'),
        'PERFORMER_PASSWORD': os.environ.get('PERFORMER_PASSWORD'),

        # Email
        'RESEND_API_KEY': os.environ.get('RESEND_API_KEY'),
        'RESEND_API_URL': os.environ.get('RESEND_API_URL', 'https://api.resend.com/emails'),
        'MAIL_DEFAULT_SENDER': os.environ.get('MAIL_DEFAULT_SENDER', 'PDSCC Info <info@azpdscc.org>'),
        'MAIL_NOREPLY_SENDER': os.environ.get('MAIL_NOREPLY_SENDER', 'PDSCC Bot <noreply@azpdscc.org>'),
        'ADMIN_NOTIFICATION_EMAIL': os.environ.get('ADMIN_NOTIFICATION_EMAIL', 'admin@azpdscc.org'),

        # AI model
        'OPENAI_API_KEY': os.environ.get('OPENAI_API_KEY'),
        'OPENAI_BASE_URL': os.environ.get('OPENAI_BASE_URL', 'https://api.openai.com/v1'),
        'OPENAI_MODEL': os.environ.get('OPENAI_MODEL', 'gpt-4o-mini'),
        'OPENAI_TIMEOUT': openai_timeout,
    }
