"""
PDSCC Flask Application - Blog API Routes

Two admin surfaces share the blog tables:

- /api/admin/blog: machine-to-machine API keyed by the x-admin-api-key
  header; one endpoint, dispatched on the HTTP method.
- /api/admin/blog-posts and /api/admin/scheduled-blog: the admin screens,
  authenticated with the admin ID token.
"""

from flask import Blueprint, jsonify, request
import logging

from pydantic import ValidationError

from auth import require_admin_api_key, require_id_token, get_services
from errors import NotFoundError, field_errors
from schemas import BlogPostForm, ScheduledBlogForm

logger = logging.getLogger(__name__)
blog_api_bp = Blueprint('blog_api', __name__, url_prefix='/api/admin')

ADMIN_API_FAILURE = 'The blog post could not be saved. Please try again later.'


# ----- Admin HTTP API (API key) -----

@blog_api_bp.route('/blog', methods=['GET', 'POST', 'PUT', 'DELETE', 'PATCH'])
@require_admin_api_key
def admin_blog_api():
    """
    POST   {title, author, date, excerpt, content, ...}   -> {success, id}
    PUT    {id, ...fields to change}                      -> {success, id}
    DELETE {id}                                           -> {success}

    Errors are reported as {'message': ...}.
    """
    if request.method not in ('POST', 'PUT', 'DELETE'):
        return jsonify({'message': f'Method {request.method} Not Allowed'}), 405

    body = request.get_json(silent=True) or {}
    blog = get_services().blog

    try:
        if request.method == 'POST':
            post = blog.create_post(BlogPostForm.model_validate(body))
            return jsonify({'success': True, 'id': post['id']})

        post_id = body.get('id')
        if request.method == 'PUT':
            if not post_id:
                return jsonify({'message': 'Document ID is required for update.'}), 400
            existing = blog.get_post(post_id)
            if not existing:
                raise NotFoundError('BlogPost', post_id)
            form = BlogPostForm.model_validate({**existing, **body})
            blog.update_post(post_id, form)
            return jsonify({'success': True, 'id': post_id})

        if not post_id:
            return jsonify({'message': 'Document ID is required for deletion.'}), 400
        blog.delete_post(post_id)
        return jsonify({'success': True})

    except ValidationError as e:
        return jsonify({'message': 'Invalid blog post', 'errors': field_errors(e)}), 400
    except NotFoundError as e:
        return jsonify({'message': str(e)}), 404
    except Exception as e:
        logger.error(f"Admin API Error: {e}", exc_info=True)
        return jsonify({'message': ADMIN_API_FAILURE}), 500


# ----- Blog posts (admin screens) -----

@blog_api_bp.route('/blog-posts', methods=['GET'])
@require_id_token
def list_blog_posts(claims):
    """All posts, newest first; ?status=Draft|Published"""
    posts = get_services().blog.list_posts(status=request.args.get('status'))
    return jsonify({'success': True, 'posts': posts, 'total': len(posts)})


@blog_api_bp.route('/blog-posts/<post_id>', methods=['GET'])
@require_id_token
def get_blog_post(claims, post_id):
    post = get_services().blog.get_post(post_id)
    if not post:
        raise NotFoundError('BlogPost', post_id)
    return jsonify({'success': True, 'post': post})


@blog_api_bp.route('/blog-posts', methods=['POST'])
@require_id_token
def create_blog_post(claims):
    form = BlogPostForm.model_validate(request.get_json(silent=True) or {})
    post = get_services().blog.create_post(form)
    return jsonify({'success': True, 'post': post}), 201


@blog_api_bp.route('/blog-posts/<post_id>', methods=['PUT'])
@require_id_token
def update_blog_post(claims, post_id):
    form = BlogPostForm.model_validate(request.get_json(silent=True) or {})
    post = get_services().blog.update_post(post_id, form)
    return jsonify({'success': True, 'post': post})


@blog_api_bp.route('/blog-posts/<post_id>/publish', methods=['POST'])
@require_id_token
def publish_blog_post(claims, post_id):
    """Publish a reviewed draft"""
    post = get_services().blog.publish_post(post_id)
    return jsonify({'success': True, 'post': post})


@blog_api_bp.route('/blog-posts/<post_id>', methods=['DELETE'])
@require_id_token
def delete_blog_post(claims, post_id):
    get_services().blog.delete_post(post_id)
    return jsonify({'success': True, 'message': 'Blog post deleted'})


@blog_api_bp.route('/automated-post', methods=['POST'])
@require_id_token
def run_automated_post(claims):
    """Run this week's automated draft now instead of waiting for the cron"""
    logger.info(f"Automated post triggered manually by {claims.get('email') or claims.get('sub')}")
    result = get_services().automation.run_automated_weekly_post()
    return jsonify(result), 200 if result['success'] else 502


# ----- Scheduled blog topics -----

@blog_api_bp.route('/scheduled-blog', methods=['GET'])
@require_id_token
def list_scheduled_posts(claims):
    entries = get_services().scheduled_blog.list_scheduled()
    return jsonify({'success': True, 'scheduled': entries})


@blog_api_bp.route('/scheduled-blog', methods=['POST'])
@require_id_token
def create_scheduled_post(claims):
    form = ScheduledBlogForm.model_validate(request.get_json(silent=True) or {})
    entry = get_services().scheduled_blog.create_scheduled(form)
    return jsonify({'success': True, 'entry': entry}), 201


@blog_api_bp.route('/scheduled-blog/<entry_id>', methods=['PUT'])
@require_id_token
def update_scheduled_post(claims, entry_id):
    """Edit a topic; an entry in Error goes back to Pending"""
    form = ScheduledBlogForm.model_validate(request.get_json(silent=True) or {})
    try:
        entry = get_services().scheduled_blog.update_scheduled(entry_id, form)
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 409
    return jsonify({'success': True, 'entry': entry})


@blog_api_bp.route('/scheduled-blog/<entry_id>', methods=['DELETE'])
@require_id_token
def delete_scheduled_post(claims, entry_id):
    get_services().scheduled_blog.delete_scheduled(entry_id)
    return jsonify({'success': True, 'message': 'Scheduled post deleted'})


@blog_api_bp.route('/scheduled-blog/process', methods=['POST'])
@require_id_token
def process_scheduled_posts(claims):
    """Publish every due scheduled topic now"""
    summary = get_services().automation.process_scheduled_posts()
    return jsonify({'success': True, **summary})
