"""
PDSCC Flask Application - Sponsors API Routes
Public sponsor list and the admin sponsor form endpoints.

The admin form expects field-level errors ({'errors': {field: [messages]}}),
so validation and auth failures here use that shape instead of the usual
{'success': False, 'error': ...}.
"""

from flask import Blueprint, jsonify, request
import logging
from functools import wraps

from pydantic import ValidationError

from auth import get_admin_claims, get_services
from errors import NotFoundError, field_errors
from schemas import SponsorForm

logger = logging.getLogger(__name__)
sponsors_api_bp = Blueprint('sponsors_api', __name__, url_prefix='/api/sponsors')


def require_admin_form(f):
    """Like require_id_token, but answers in the form-error shape"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        claims, error = get_admin_claims()
        if not claims:
            return jsonify({'errors': {'_form': [error]}}), 401
        return f(claims, *args, **kwargs)
    return decorated_function


def _parse_form():
    return SponsorForm.model_validate(request.get_json(silent=True) or {})


# ----- Public Sponsors API -----

@sponsors_api_bp.route('', methods=['GET'])
def get_sponsors():
    """All sponsors, Diamond first, then alphabetical within a level"""
    sponsors = get_services().sponsors.list_sponsors()
    return jsonify({
        'success': True,
        'sponsors': sponsors
    })


@sponsors_api_bp.route('/<sponsor_id>', methods=['GET'])
def get_sponsor(sponsor_id):
    sponsor = get_services().sponsors.get_sponsor(sponsor_id)
    if not sponsor:
        raise NotFoundError('Sponsor', sponsor_id)
    return jsonify({'success': True, 'sponsor': sponsor})


# ----- Admin Sponsors API -----

@sponsors_api_bp.route('/admin', methods=['POST'])
@require_admin_form
def create_sponsor(claims):
    try:
        sponsor = get_services().sponsors.create_sponsor(_parse_form())
    except ValidationError as e:
        return jsonify({'errors': field_errors(e)}), 400

    logger.info(f"Sponsor '{sponsor['name']}' created")
    return jsonify({
        'success': True,
        'message': 'Sponsor created successfully',
        'sponsor': sponsor
    }), 201


@sponsors_api_bp.route('/admin/<sponsor_id>', methods=['PUT'])
@require_admin_form
def update_sponsor(claims, sponsor_id):
    try:
        sponsor = get_services().sponsors.update_sponsor(sponsor_id, _parse_form())
    except ValidationError as e:
        return jsonify({'errors': field_errors(e)}), 400
    except NotFoundError:
        return jsonify({'errors': {'_form': ['Sponsor not found']}}), 404

    return jsonify({
        'success': True,
        'message': 'Sponsor updated successfully',
        'sponsor': sponsor
    })


@sponsors_api_bp.route('/admin/<sponsor_id>', methods=['DELETE'])
@require_admin_form
def delete_sponsor(claims, sponsor_id):
    try:
        get_services().sponsors.delete_sponsor(sponsor_id)
    except NotFoundError:
        return jsonify({'errors': {'_form': ['Sponsor not found']}}), 404

    logger.info(f"Sponsor {sponsor_id} deleted")
    return jsonify({
        'success': True,
        'message': 'Sponsor deleted successfully'
    })
