"""
PDSCC Flask Application - Page Routes
Handles serving all HTML-rendered pages.

Route overview (all public):

- `/` (Home): next events, latest posts, sponsors
- `/events`: upcoming and past events
- `/events/<slug>`: event detail
- `/blog`: published posts; publishes any due scheduled topics first
- `/blog/<slug>`: a single published post
- `/sponsorship`: sponsor tiers and current sponsors
- `/about`: mission and committee members
"""

from flask import Blueprint, render_template, abort
import logging

from auth import get_services

logger = logging.getLogger(__name__)
pages_bp = Blueprint('pages', __name__)


@pages_bp.route('/')
def index():
    """Home page"""
    services = get_services()
    return render_template(
        'index.html',
        events=services.events.list_upcoming(limit=3),
        posts=services.blog.list_published()[:3],
        sponsors=services.sponsors.list_sponsors()
    )


@pages_bp.route('/events')
def events():
    """Events page: upcoming first, then past events newest first"""
    services = get_services()
    upcoming = services.events.list_events(order='asc', upcoming_only=True)
    upcoming_ids = {e['id'] for e in upcoming}
    past = [e for e in services.events.list_events(order='desc') if e['id'] not in upcoming_ids]
    return render_template('events.html', upcoming=upcoming, past=past)


@pages_bp.route('/events/<slug>')
def event_detail(slug):
    event = get_services().events.get_event_by_slug(slug)
    if not event:
        abort(404)
    return render_template('event_detail.html', event=event)


@pages_bp.route('/blog')
def blog():
    """
    Blog index.

    Due scheduled topics are published before the list is read. If that
    pass fails the page still renders with whatever is already published.
    """
    services = get_services()
    try:
        summary = services.automation.process_scheduled_posts()
        if summary['failed']:
            logger.warning(f"Scheduled posts failed during blog render: {summary['failed']}")
    except Exception as e:
        logger.error(f"Error processing scheduled posts: {e}", exc_info=True)

    return render_template('blog.html', posts=services.blog.list_published())


@pages_bp.route('/blog/<slug>')
def blog_post(slug):
    post = get_services().blog.get_post_by_slug(slug, published_only=True)
    if not post:
        abort(404)
    return render_template('blog_post.html', post=post)


@pages_bp.route('/sponsorship')
def sponsorship():
    return render_template('sponsorship.html', sponsors=get_services().sponsors.list_sponsors())


@pages_bp.route('/about')
def about():
    """About page with the committee"""
    return render_template('about.html', team=get_services().team.list_members())
