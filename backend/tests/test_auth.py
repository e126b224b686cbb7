"""
Tests for admin ID tokens, staff logins and role permissions.
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from auth import (
    ADMIN_ROLE, ALL_PERMISSIONS, IdentityVerifier, StaffAuth, has_permission, permissions_for
)
from errors import ConfigurationError


def staff_auth(**overrides):
    credentials = {
        'volunteer': ('volunteer', 'volunteer-pass'),
        'performances': ('performer', 'performer-pass'),
    }
    credentials.update(overrides)
    return StaffAuth(credentials, secret_key='test-jwt-secret')


def test_role_permissions():
    assert permissions_for(['checkin']) == {'vendors:checkin', 'vendors:read'}
    assert permissions_for(['volunteer', 'checkin']) == {'volunteer:portal', 'vendors:checkin', 'vendors:read'}
    assert permissions_for([ADMIN_ROLE]) == ALL_PERMISSIONS
    assert permissions_for(['unknown']) == set()
    assert has_permission(['performances'], 'performances:read')
    assert not has_permission(['performances'], 'vendors:checkin')


def test_staff_login_issues_role_token():
    auth = staff_auth()

    token = auth.login('volunteer', 'volunteer', 'volunteer-pass')

    assert token['token_type'] == 'Bearer'
    assert token['roles'] == ['volunteer', 'checkin']
    assert 'vendors:checkin' in token['permissions']
    payload = auth.verify(token['access_token'])
    assert payload['sub'] == 'volunteer'
    assert payload['type'] == 'staff'


def test_staff_login_bad_credentials():
    auth = staff_auth()
    assert auth.login('volunteer', 'volunteer', 'wrong') is None
    assert auth.login('performances', 'volunteer', 'volunteer-pass') is None


def test_staff_login_not_configured():
    auth = staff_auth(performances=(None, None))

    with pytest.raises(ConfigurationError):
        auth.login('performances', 'performer', 'performer-pass')


def test_staff_verify_rejects_non_staff_tokens():
    auth = staff_auth()
    other = jwt.encode({'sub': 'x', 'type': 'refresh'}, 'test-jwt-secret', algorithm='HS256')

    with pytest.raises(jwt.InvalidTokenError):
        auth.verify(other)


def test_identity_verifier_shared_secret():
    verifier = IdentityVerifier(project_id='pdscc-site', shared_secret='id-secret')
    good = jwt.encode({'sub': 'uid', 'aud': 'pdscc-site'}, 'id-secret', algorithm='HS256')
    wrong_audience = jwt.encode({'sub': 'uid', 'aud': 'someone-else'}, 'id-secret', algorithm='HS256')
    expired = jwt.encode(
        {'sub': 'uid', 'aud': 'pdscc-site', 'exp': datetime.now(timezone.utc) - timedelta(minutes=1)},
        'id-secret', algorithm='HS256'
    )

    assert verifier.verify(good)['sub'] == 'uid'
    with pytest.raises(jwt.InvalidAudienceError):
        verifier.verify(wrong_audience)
    with pytest.raises(jwt.ExpiredSignatureError):
        verifier.verify(expired)


def test_identity_verifier_not_configured():
    with pytest.raises(ConfigurationError):
        IdentityVerifier().verify('anything')


# ----- API -----

def test_staff_login_endpoint(client):
    response = client.post('/api/auth/staff-login', json={
        'role': 'performances', 'username': 'performer', 'password': 'performer-pass'
    })

    assert response.status_code == 200
    data = response.get_json()
    assert data['roles'] == ['performances']
    assert data['permissions'] == ['performances:read']


def test_staff_login_endpoint_bad_password(client):
    response = client.post('/api/auth/staff-login', json={
        'role': 'volunteer', 'username': 'volunteer', 'password': 'nope'
    })
    assert response.status_code == 401


def test_staff_login_endpoint_not_configured(client, services):
    services.staff_auth = StaffAuth({}, secret_key=None)

    response = client.post('/api/auth/staff-login', json={
        'role': 'volunteer', 'username': 'volunteer', 'password': 'volunteer-pass'
    })

    assert response.status_code == 503
    assert response.get_json()['error'] == 'Login system is not configured'


def test_whoami(client, volunteer_headers, admin_headers):
    assert client.get('/api/auth/me').status_code == 401

    staff = client.get('/api/auth/me', headers=volunteer_headers).get_json()
    assert staff['roles'] == ['volunteer', 'checkin']

    admin = client.get('/api/auth/me', headers=admin_headers).get_json()
    assert admin['roles'] == ['admin']
    assert admin['permissions'] == sorted(ALL_PERMISSIONS)
