"""
PDSCC Flask Application - Team API Routes
Committee members shown on the About page.
"""

from flask import Blueprint, jsonify, request
import logging

from auth import require_id_token, get_services
from schemas import TeamMemberForm

logger = logging.getLogger(__name__)
team_api_bp = Blueprint('team_api', __name__, url_prefix='/api/team')


@team_api_bp.route('', methods=['GET'])
def get_team():
    members = get_services().team.list_members()
    return jsonify({'success': True, 'members': members})


@team_api_bp.route('/<member_id>', methods=['GET'])
def get_team_member(member_id):
    member = get_services().team.get_member(member_id)
    if not member:
        return jsonify({'success': False, 'error': 'Team member not found'}), 404
    return jsonify({'success': True, 'member': member})


@team_api_bp.route('', methods=['POST'])
@require_id_token
def create_team_member(claims):
    form = TeamMemberForm.model_validate(request.get_json(silent=True) or {})
    member = get_services().team.create_member(form)
    return jsonify({'success': True, 'member': member}), 201


@team_api_bp.route('/<member_id>', methods=['PUT'])
@require_id_token
def update_team_member(claims, member_id):
    form = TeamMemberForm.model_validate(request.get_json(silent=True) or {})
    member = get_services().team.update_member(member_id, form)
    return jsonify({'success': True, 'member': member})


@team_api_bp.route('/<member_id>', methods=['DELETE'])
@require_id_token
def delete_team_member(claims, member_id):
    get_services().team.delete_member(member_id)
    logger.info(f"Team member {member_id} removed by {claims.get('email') or claims.get('sub')}")
    return jsonify({'success': True, 'message': 'Team member deleted'})
