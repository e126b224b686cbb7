"""
PDSCC Flask Application - Chatbot API Route
"""

from flask import Blueprint, jsonify, request
import logging

from auth import get_services
from errors import ConfigurationError, ExternalProviderError
from flows_content import CHAT_FALLBACK
from schemas import ChatRequest

logger = logging.getLogger(__name__)
chat_api_bp = Blueprint('chat_api', __name__, url_prefix='/api')


@chat_api_bp.route('/chat', methods=['POST'])
def chat():
    """
    Answer the last user message in the conversation.

    Request JSON:
    {
        "history": [{"role": "user", "content": "When is Teeyan Da Mela?"}]
    }

    The widget always gets a reply; if the model is unavailable the reply is
    the standard "contact the team" answer and `degraded` is true.
    """
    payload = ChatRequest.model_validate(request.get_json(silent=True) or {})
    try:
        reply = get_services().content_flows.chat(payload.history)
    except (ConfigurationError, ExternalProviderError) as e:
        logger.error(f"Chat reply failed: {e}")
        return jsonify({'success': True, 'reply': CHAT_FALLBACK, 'degraded': True})

    return jsonify({'success': True, 'reply': reply or CHAT_FALLBACK})
