"""
PDSCC Flask Application - Events API Routes
Public event listings, admin event CRUD and the AI helpers used by the
event editor.
"""

from flask import Blueprint, jsonify, request
import logging

from auth import require_id_token, get_services
from database import EVENT_CATEGORIES
from schemas import EventForm, EventDescriptionsRequest, SocialPostsRequest, HighlightsRequest

logger = logging.getLogger(__name__)
events_api_bp = Blueprint('events_api', __name__, url_prefix='/api/events')


# ----- Events API -----

@events_api_bp.route('', methods=['GET'])
def get_events():
    """List events; ?filter=upcoming|all, ?category=, ?order=asc|desc"""
    filter_type = request.args.get('filter', 'all')
    category = request.args.get('category')
    order = request.args.get('order', 'asc')

    events = get_services().events.list_events(
        order='desc' if order == 'desc' else 'asc',
        upcoming_only=filter_type == 'upcoming',
        category=category
    )
    return jsonify({
        'success': True,
        'events': events,
        'total': len(events)
    })


@events_api_bp.route('/categories', methods=['GET'])
def get_event_categories():
    return jsonify({'success': True, 'categories': list(EVENT_CATEGORIES)})


@events_api_bp.route('/<slug>', methods=['GET'])
def get_event(slug):
    """Get a single event by slug"""
    event = get_services().events.get_event_by_slug(slug)
    if not event:
        return jsonify({
            'success': False,
            'error': 'Event not found'
        }), 404
    return jsonify({'success': True, 'event': event})


@events_api_bp.route('', methods=['POST'])
@require_id_token
def create_event(claims):
    """Create a new event (admin only)"""
    form = EventForm.model_validate(request.get_json(silent=True) or {})
    event = get_services().events.create_event(form)
    logger.info(f"Event '{event['name']}' created by {claims.get('email') or claims.get('sub')}")
    return jsonify({
        'success': True,
        'message': 'Event created successfully',
        'event': event
    }), 201


@events_api_bp.route('/<event_id>', methods=['PUT'])
@require_id_token
def update_event(claims, event_id):
    """Update an existing event (admin only)"""
    form = EventForm.model_validate(request.get_json(silent=True) or {})
    event = get_services().events.update_event(event_id, form)
    return jsonify({
        'success': True,
        'message': 'Event updated successfully',
        'event': event
    })


@events_api_bp.route('/<event_id>', methods=['DELETE'])
@require_id_token
def delete_event(claims, event_id):
    """Delete an event (admin only)"""
    get_services().events.delete_event(event_id)
    logger.info(f"Event {event_id} deleted by {claims.get('email') or claims.get('sub')}")
    return jsonify({
        'success': True,
        'message': 'Event deleted successfully'
    })


# ----- AI helpers -----

@events_api_bp.route('/ai-descriptions', methods=['POST'])
@require_id_token
def generate_event_descriptions_ai(claims):
    """
    Generate short and long descriptions for an event from a free-form prompt.

    Request JSON:
    {
        "prompt": "Diwali festival at Goodyear Ballpark with food stalls and fireworks"
    }

    Response JSON (success):
    {
        "success": true,
        "description": "...",
        "full_description": "..."
    }
    """
    payload = EventDescriptionsRequest.model_validate(request.get_json(silent=True) or {})
    result = get_services().content_flows.generate_event_descriptions(payload.prompt)
    return jsonify({'success': True, **result.model_dump()})


@events_api_bp.route('/social-posts', methods=['POST'])
@require_id_token
def generate_social_posts_ai(claims):
    """Draft Twitter and Facebook announcements for an event"""
    payload = SocialPostsRequest.model_validate(request.get_json(silent=True) or {})
    result = get_services().content_flows.generate_social_posts(
        payload.name, payload.description, payload.date, payload.slug
    )
    return jsonify({'success': True, **result.model_dump()})


@events_api_bp.route('/highlights', methods=['POST'])
@require_id_token
def generate_event_highlights_ai(claims):
    payload = HighlightsRequest.model_validate(request.get_json(silent=True) or {})
    result = get_services().content_flows.generate_event_highlights(
        payload.event_name, payload.event_description
    )
    return jsonify({'success': True, **result.model_dump()})


@events_api_bp.route('/generate', methods=['POST'])
@require_id_token
def generate_event(claims):
    """
    Save a new event and draft its social media announcements.

    The event is stored before the AI call, so a failed draft leaves the
    event in place and reports the failure in `social_error`.
    """
    form = EventForm.model_validate(request.get_json(silent=True) or {})
    services = get_services()
    event = services.events.create_event(form)

    try:
        posts = services.content_flows.generate_social_posts(
            event['name'], event['description'], event['date_display'], event['slug']
        )
    except Exception as e:
        logger.error(f"Social posts for event {event['id']} failed: {e}")
        return jsonify({
            'success': True,
            'event': event,
            'social_posts': None,
            'social_error': str(e)
        }), 201

    return jsonify({
        'success': True,
        'event': event,
        'social_posts': posts.model_dump()
    }), 201
