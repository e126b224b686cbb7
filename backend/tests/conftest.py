"""
Shared fixtures: an in-memory database, a real AIClient whose OpenAI client
is a MagicMock, and a mocked email service.
"""

import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import jwt
import pytest

from ai_client import AIClient
from app import create_app
from database import Database
from email_config import EmailService
from extensions import AppServices
from schemas import VendorApplicationRequest

# Monday 2 June 2025, ISO week 23
FIXED_NOW = datetime(2025, 6, 2, 12, 0, tzinfo=timezone.utc)

TEST_SETTINGS = {
    'DEBUG': False,
    'PORT': 5000,
    'DATABASE_URL': 'sqlite://',
    'SITE_BASE_URL': 'https://www.azpdscc.org',
    'CORS_ORIGINS': [],
    'SEED_TEAM': False,
    'ADMIN_API_KEY': 'test-admin-key',
    'CRON_SECRET': 'test-cron-secret',
    'JWT_SECRET_KEY': 'test-jwt-secret',
    'FIREBASE_SERVICE_ACCOUNT': None,
    'FIREBASE_PROJECT_ID': None,
    'ID_TOKEN_SECRET': 'test-id-token-secret',
    'ID_TOKEN_JWKS_URL': None,
    'VOLUNTEER_USERNAME': 'volunteer',
    'VOLUNTEER_PASSWORD': 'volunteer-pass',
    'PERFORMER_USERNAME': 'performer',
    'PERFORMER_PASSWORD': 'performer-pass',
    'RESEND_API_KEY': 're_test',
    'RESEND_API_URL': 'https://api.resend.com/emails',
    'MAIL_DEFAULT_SENDER': 'PDSCC Info <info@azpdscc.org>',
    'MAIL_NOREPLY_SENDER': 'PDSCC Bot <noreply@azpdscc.org>',
    'ADMIN_NOTIFICATION_EMAIL': 'admin@azpdscc.org',
    'OPENAI_API_KEY': 'sk-test',
    'OPENAI_BASE_URL': None,
    'OPENAI_MODEL': 'test-model',
    'OPENAI_TIMEOUT': 5,
}


def ai_reply(content):
    """Shape of an OpenAI chat completion with a single choice"""
    if isinstance(content, dict):
        content = json.dumps(content)
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


BLOG_REPLY = {
    'title': 'Celebrating Vaisakhi in Phoenix',
    'slug': 'celebrating-vaisakhi-in-phoenix',
    'excerpt': 'How the Phoenix Indian community marks the harvest festival.',
    'content': '<p>Vaisakhi brings AZ Desis together every spring.</p><h2>Join us</h2><p>See you there.</p>',
}


@pytest.fixture
def settings():
    return dict(TEST_SETTINGS)


@pytest.fixture
def database():
    db = Database('sqlite://')
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def openai_mock():
    """Stands in for openai.OpenAI(); set chat.completions.create.return_value per test"""
    mock = MagicMock()
    mock.chat.completions.create.return_value = ai_reply('Thank you for joining the PDSCC community!')
    return mock


@pytest.fixture
def ai_client(openai_mock):
    client = AIClient(api_key='sk-test', model='test-model')
    client._client = openai_mock
    return client


@pytest.fixture
def email_service(settings):
    service = MagicMock(spec=EmailService)
    service.default_sender = settings['MAIL_DEFAULT_SENDER']
    service.noreply_sender = settings['MAIL_NOREPLY_SENDER']
    service.is_configured.return_value = True
    service.send_email.return_value = 'email_123'
    service.send_admin_notification.return_value = 'email_456'
    return service


@pytest.fixture
def services(settings, database, ai_client, email_service):
    return AppServices(
        settings,
        database=database,
        ai_client=ai_client,
        email_service=email_service,
        clock=lambda: FIXED_NOW
    )


@pytest.fixture
def app(settings, services):
    app = create_app(settings, services)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(settings):
    """Authorization header carrying an HS256 admin ID token"""
    token = jwt.encode(
        {
            'sub': 'admin-uid',
            'email': 'admin@azpdscc.org',
            'exp': datetime.now(timezone.utc) + timedelta(hours=1)
        },
        settings['ID_TOKEN_SECRET'],
        algorithm='HS256'
    )
    return {'Authorization': f'Bearer {token}'}


def staff_headers(client, role, username, password):
    response = client.post('/api/auth/staff-login', json={
        'role': role,
        'username': username,
        'password': password
    })
    assert response.status_code == 200
    return {'Authorization': f"Bearer {response.get_json()['access_token']}"}


@pytest.fixture
def volunteer_headers(client):
    return staff_headers(client, 'volunteer', 'volunteer', 'volunteer-pass')


@pytest.fixture
def performer_headers(client):
    return staff_headers(client, 'performances', 'performer', 'performer-pass')


def vendor_application(**overrides):
    data = {
        'name': 'Harpreet Kaur',
        'organization': 'Kaur Kitchen',
        'email': 'harpreet@example.com',
        'phone': '602-555-0101',
        'booth_type': 'Food Stall (10x10)',
        'total_price': 350,
        'product_description': 'Samosas, chaat and mango lassi',
        'zelle_sender_name': 'Harpreet Kaur',
        'zelle_date_sent': '2025-05-20',
        'payment_confirmed': True,
    }
    data.update(overrides)
    return VendorApplicationRequest(**data)
