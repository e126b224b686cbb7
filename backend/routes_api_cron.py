"""
PDSCC Flask Application - Cron API Routes
Endpoints hit by the external scheduler with ?secret=<CRON_SECRET>.
"""

from flask import Blueprint, jsonify, request
import hmac
import logging

from auth import get_services

logger = logging.getLogger(__name__)
cron_api_bp = Blueprint('cron_api', __name__, url_prefix='/api/cron')


def _secret_valid(provided) -> bool:
    expected = get_services().settings.get('CRON_SECRET')
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))


@cron_api_bp.route('/run-weekly-post', methods=['GET'])
def run_weekly_post():
    """Generate this week's draft blog post"""
    if not _secret_valid(request.args.get('secret')):
        logger.warning("Cron request rejected: bad or missing secret")
        return jsonify({'error': 'Unauthorized'}), 401

    try:
        logger.info("Cron job triggered: Running automated weekly post...")
        result = get_services().automation.run_automated_weekly_post()
        logger.info(f"Cron job finished: {result}")
        return jsonify(result)
    except Exception as e:
        logger.error(f"Cron job failed: {e}", exc_info=True)
        return jsonify({'error': 'Internal Server Error', 'details': str(e)}), 500
