"""
PDSCC Flask Application - Auth API Routes
Staff logins for the volunteer / check-in and performances portals.
Admins sign in with the identity provider in the browser; nothing here
issues admin sessions.
"""

from flask import Blueprint, jsonify, request
import logging

from auth import LOGIN_NOT_CONFIGURED, get_current_principal, permissions_for, get_services
from errors import ConfigurationError
from schemas import StaffLoginRequest

logger = logging.getLogger(__name__)
auth_api_bp = Blueprint('auth_api', __name__, url_prefix='/api/auth')


@auth_api_bp.route('/staff-login', methods=['POST'])
def staff_login():
    """
    Exchange portal credentials for a short-lived bearer token.

    Request JSON: {"role": "volunteer" | "performances", "username": ..., "password": ...}
    """
    payload = StaffLoginRequest.model_validate(request.get_json(silent=True) or {})

    try:
        token = get_services().staff_auth.login(payload.role, payload.username, payload.password)
    except ConfigurationError:
        logger.error(f"Staff login attempted for '{payload.role}' but it is not configured")
        return jsonify({'success': False, 'error': LOGIN_NOT_CONFIGURED}), 503

    if not token:
        logger.warning(f"Failed {payload.role} login for user {payload.username}")
        return jsonify({'success': False, 'error': 'Invalid username or password'}), 401

    logger.info(f"{payload.role} login for user {payload.username}")
    return jsonify({'success': True, **token})


@auth_api_bp.route('/me', methods=['GET'])
def whoami():
    """Roles and permissions of the bearer token, for the portal UI"""
    principal = get_current_principal()
    if not principal:
        return jsonify({'success': False, 'error': 'Authentication required'}), 401
    return jsonify({
        'success': True,
        'id': principal['id'],
        'roles': principal['roles'],
        'permissions': sorted(permissions_for(principal['roles']))
    })
