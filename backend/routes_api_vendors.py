"""
PDSCC Flask Application - Vendor & Performance API Routes
Public applications, the booth-placement helper, and the staff-only
portals for vendor check-in and performance review.
"""

from flask import Blueprint, jsonify, request
import logging

from auth import require_permission, get_services
from routes_api_contact import flow_response
from schemas import (
    VendorApplicationRequest, BoothPlacementRequest, PerformanceApplicationRequest, GeneralVendorRegistration
)

logger = logging.getLogger(__name__)
vendors_api_bp = Blueprint('vendors_api', __name__, url_prefix='/api')


# ----- Vendors -----

@vendors_api_bp.route('/vendors/apply', methods=['POST'])
def apply_vendor():
    """Store a vendor application and email the vendor their QR ticket"""
    application = VendorApplicationRequest.model_validate(request.get_json(silent=True) or {})
    if not application.payment_confirmed:
        return jsonify({
            'success': False,
            'errors': {'payment_confirmed': ['Please confirm you have sent the booth payment.']}
        }), 400
    result = get_services().email_flows.send_vendor_application(application)
    if result['success']:
        return jsonify(result), 201
    return flow_response(result)


@vendors_api_bp.route('/vendors/register', methods=['POST'])
def register_vendor_network():
    """Join the general vendor list for future events"""
    registration = GeneralVendorRegistration.model_validate(request.get_json(silent=True) or {})
    return flow_response(get_services().email_flows.send_general_registration(registration))


@vendors_api_bp.route('/vendors/booth-suggestion', methods=['POST'])
def booth_suggestion():
    payload = BoothPlacementRequest.model_validate(request.get_json(silent=True) or {})
    suggestion = get_services().content_flows.suggest_booth_placement(
        payload.booth_type, payload.product_description, payload.event
    )
    return jsonify({'success': True, **suggestion.model_dump()})


@vendors_api_bp.route('/vendors/applications', methods=['GET'])
@require_permission('vendors:read')
def list_vendor_applications(principal):
    applications = get_services().vendors.list_applications()
    return jsonify({
        'success': True,
        'applications': applications,
        'total': len(applications)
    })


@vendors_api_bp.route('/vendors/applications/<application_id>', methods=['GET'])
@require_permission('vendors:read')
def get_vendor_application(principal, application_id):
    """Ticket lookup for the QR verification screen"""
    application = get_services().vendors.get_application(application_id)
    if not application:
        return jsonify({'success': False, 'error': 'Ticket not found'}), 404
    return jsonify({'success': True, 'application': application})


@vendors_api_bp.route('/vendors/check-in/<application_id>', methods=['POST'])
@require_permission('vendors:checkin')
def check_in_vendor(principal, application_id):
    """
    Check a vendor in from their QR ticket.

    A repeat scan is not an error: it answers success with
    already_checked_in = true and the original check-in time.
    """
    result = get_services().vendors.check_in(application_id)
    if result['already_checked_in']:
        logger.info(f"Vendor {application_id} scanned again by {principal['id']}")
    else:
        logger.info(f"Vendor {application_id} checked in by {principal['id']}")
    return jsonify(result)


# ----- Performances -----

@vendors_api_bp.route('/performances/apply', methods=['POST'])
def apply_performance():
    application = PerformanceApplicationRequest.model_validate(request.get_json(silent=True) or {})
    result = get_services().email_flows.send_performance_application(application)
    if result['success']:
        return jsonify(result), 201
    return flow_response(result)


@vendors_api_bp.route('/performances', methods=['GET'])
@require_permission('performances:read')
def list_performance_applications(principal):
    applications = get_services().performances.list_applications()
    return jsonify({
        'success': True,
        'applications': applications,
        'total': len(applications)
    })
