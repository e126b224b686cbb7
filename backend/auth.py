"""
PDSCC Authentication Helpers
Admin ID-token verification, the admin API key, staff logins and the
role -> permission table.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, request, jsonify

from errors import ConfigurationError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'
STAFF_TOKEN_HOURS = 12

ADMIN_ROLE = 'admin'

ROLE_PERMISSIONS = {
    'checkin': {'vendors:checkin', 'vendors:read'},
    'performances': {'performances:read'},
    'volunteer': {'volunteer:portal'},
}

ALL_PERMISSIONS = set().union(*ROLE_PERMISSIONS.values())

# Which roles each staff login grants
STAFF_LOGIN_ROLES = {
    'volunteer': ['volunteer', 'checkin'],
    'performances': ['performances'],
}

LOGIN_NOT_CONFIGURED = 'Login system is not configured'


def get_services():
    return current_app.extensions['pdscc']


def permissions_for(roles) -> set:
    """Union of permissions for a list of roles; admin holds every permission"""
    if ADMIN_ROLE in roles:
        return set(ALL_PERMISSIONS)
    granted = set()
    for role in roles:
        granted |= ROLE_PERMISSIONS.get(role, set())
    return granted


def has_permission(roles, permission: str) -> bool:
    return permission in permissions_for(roles)


def get_token_from_request():
    """Extract bearer token from request header"""
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return None

    # Format: "Bearer <token>"
    try:
        scheme, token = auth_header.split(' ', 1)
    except ValueError:
        return None
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


# ========================================
# Admin identity tokens
# ========================================

class IdentityVerifier:
    """
    Verifies ID tokens issued by the external identity provider.

    Production tokens are RS256 and checked against the provider's JWKS with
    audience = project id. When `shared_secret` is set, HS256 tokens signed
    with it are accepted instead (local development and tests).
    """

    def __init__(self, project_id: str = None, shared_secret: str = None,
                 jwks_url: str = None, issuer_base: str = 'https://securetoken.google.com/'):
        self.project_id = project_id
        self.shared_secret = shared_secret
        self.jwks_url = jwks_url
        self.issuer = f"{issuer_base}{project_id}" if project_id else None
        self._jwks_client = None

    @classmethod
    def from_settings(cls, settings: dict):
        return cls(
            project_id=settings.get('FIREBASE_PROJECT_ID'),
            shared_secret=settings.get('ID_TOKEN_SECRET'),
            jwks_url=settings.get('ID_TOKEN_JWKS_URL'),
        )

    def is_configured(self) -> bool:
        return bool(self.shared_secret or (self.project_id and self.jwks_url))

    def verify(self, token: str) -> dict:
        """
        Decode and validate a token.

        Raises:
            ConfigurationError: Neither a shared secret nor a project id is configured
            jwt.InvalidTokenError: The token is missing, expired or forged
        """
        if not self.is_configured():
            raise ConfigurationError('Identity verification is not configured')

        if self.shared_secret:
            options = {'verify_aud': bool(self.project_id)}
            return jwt.decode(
                token,
                self.shared_secret,
                algorithms=['HS256'],
                audience=self.project_id,
                options=options
            )

        if self._jwks_client is None:
            self._jwks_client = jwt.PyJWKClient(self.jwks_url)
        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
        except jwt.PyJWKClientError as e:
            raise jwt.InvalidTokenError(f'Could not resolve signing key: {e}') from e
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=['RS256'],
            audience=self.project_id,
            issuer=self.issuer
        )


def get_admin_claims():
    """
    Verified claims of the admin ID token on this request.

    Returns:
        tuple: (claims or None, error message or None)
    """
    token = get_token_from_request()
    if not token:
        return None, 'Authentication required'
    try:
        return get_services().identity.verify(token), None
    except ConfigurationError as e:
        logger.error(f"Admin token check failed: {e}")
        return None, 'Admin authentication is not configured'
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected admin token: {e}")
        return None, 'Invalid or expired token'


def require_id_token(f):
    """Decorator to require a verified admin ID token; passes the claims as the first argument"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        claims, error = get_admin_claims()
        if not claims:
            return jsonify({
                'success': False,
                'error': error
            }), 401
        return f(claims, *args, **kwargs)
    return decorated_function


# ========================================
# Admin HTTP API key
# ========================================

def admin_api_key_valid(provided: str) -> bool:
    expected = get_services().settings.get('ADMIN_API_KEY')
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))


def require_admin_api_key(f):
    """Decorator for the machine-to-machine admin API (x-admin-api-key header)"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not admin_api_key_valid(request.headers.get('x-admin-api-key')):
            return jsonify({'message': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function


# ========================================
# Staff logins
# ========================================

class StaffAuth:
    """Static environment credentials exchanged for short-lived role tokens"""

    def __init__(self, credentials: dict, secret_key: str = None, token_hours: int = STAFF_TOKEN_HOURS):
        # credentials: {login_name: (username, password)}
        self.credentials = credentials
        self.secret_key = secret_key
        self.token_hours = token_hours

    @classmethod
    def from_settings(cls, settings: dict):
        return cls(
            credentials={
                'volunteer': (settings.get('VOLUNTEER_USERNAME'), settings.get('VOLUNTEER_PASSWORD')),
                'performances': (settings.get('PERFORMER_USERNAME'), settings.get('PERFORMER_PASSWORD')),
            },
            secret_key=settings.get('JWT_SECRET_KEY'),
        )

    def is_configured(self, login: str) -> bool:
        username, password = self.credentials.get(login, (None, None))
        return bool(self.secret_key and username and password)

    def login(self, login: str, username: str, password: str):
        """
        Check credentials for a staff login.

        Returns:
            dict: token payload on success, None on bad credentials

        Raises:
            ConfigurationError: The login or the signing key is not configured
        """
        if login not in STAFF_LOGIN_ROLES or not self.is_configured(login):
            raise ConfigurationError(LOGIN_NOT_CONFIGURED)

        expected_user, expected_password = self.credentials[login]
        user_ok = hmac.compare_digest(username.encode('utf-8'), expected_user.encode('utf-8'))
        password_ok = hmac.compare_digest(password.encode('utf-8'), expected_password.encode('utf-8'))
        if not (user_ok and password_ok):
            return None

        roles = STAFF_LOGIN_ROLES[login]
        now = datetime.now(timezone.utc)
        payload = {
            'sub': username,
            'roles': roles,
            'type': 'staff',
            'exp': now + timedelta(hours=self.token_hours),
            'iat': now
        }
        return {
            'access_token': jwt.encode(payload, self.secret_key, algorithm=JWT_ALGORITHM),
            'token_type': 'Bearer',
            'expires_in': self.token_hours * 3600,
            'roles': roles,
            'permissions': sorted(permissions_for(roles))
        }

    def verify(self, token: str) -> dict:
        if not self.secret_key:
            raise ConfigurationError(LOGIN_NOT_CONFIGURED)
        payload = jwt.decode(token, self.secret_key, algorithms=[JWT_ALGORITHM])
        if payload.get('type') != 'staff':
            raise jwt.InvalidTokenError('Not a staff token')
        return payload


def get_current_principal():
    """
    Resolve the caller to {'id', 'roles'} from either an admin ID token or a staff token.
    """
    token = get_token_from_request()
    if not token:
        return None
    services = get_services()

    try:
        payload = services.staff_auth.verify(token)
        return {'id': payload.get('sub'), 'roles': payload.get('roles', [])}
    except (jwt.InvalidTokenError, ConfigurationError):
        pass

    try:
        claims = services.identity.verify(token)
        return {'id': claims.get('sub') or claims.get('email'), 'roles': [ADMIN_ROLE]}
    except (jwt.InvalidTokenError, ConfigurationError):
        return None


def require_permission(permission: str):
    """Decorator factory: caller must hold `permission`; passes the principal as the first argument"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            principal = get_current_principal()
            if not principal:
                return jsonify({
                    'success': False,
                    'error': 'Authentication required'
                }), 401
            if not has_permission(principal['roles'], permission):
                return jsonify({
                    'success': False,
                    'error': 'You do not have permission to do that'
                }), 403
            return f(principal, *args, **kwargs)
        return decorated_function
    return decorator
