"""
PDSCC Flask Application
Main application factory.
Builds the service container, registers all blueprints, and installs the
template filters, security headers and error handlers.
"""

# IMPORTANT: Load environment variables FIRST before other imports
from dotenv import load_dotenv
load_dotenv()

from flask import Flask, render_template, jsonify, request
from flask_cors import CORS
import logging
from datetime import datetime
from markupsafe import Markup
import bleach
from pydantic import ValidationError
from urllib.parse import urlparse

from config import load_settings
from errors import PDSCCError, AINotConfiguredError, ConfigurationError, NotFoundError, field_errors, status_for
from extensions import AppServices, EXTENSION_KEY

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

APP_VERSION = '1.0.0'


def _origin_from_url(url_value):
    """Extract origin (scheme://host[:port]) from a URL string"""
    if not url_value:
        return None
    parsed = urlparse(url_value)
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def _get_www_variant(url_value):
    """Return www. variant of a URL if applicable"""
    parsed = urlparse(url_value)
    if parsed.hostname and not parsed.hostname.startswith('www.'):
        port = f":{parsed.port}" if parsed.port else ''
        return f"{parsed.scheme}://www.{parsed.hostname}{port}"
    return None


def build_cors_origins(settings):
    """CORS origins from CORS_ORIGINS, or localhost plus the public site"""
    if settings.get('CORS_ORIGINS'):
        return settings['CORS_ORIGINS']

    origins = ['http://localhost:5000', 'http://127.0.0.1:5000']
    site_base_url = settings.get('SITE_BASE_URL')
    if site_base_url:
        origins.append(site_base_url)
        www_variant = _get_www_variant(site_base_url)
        if www_variant:
            origins.append(www_variant)
    return origins


# ========================================
# HTML Sanitization
# ========================================
# Allowed HTML for blog post bodies and event descriptions
ALLOWED_TAGS = ['p', 'br', 'strong', 'em', 'b', 'i', 'u', 'a', 'ul', 'ol', 'li',
                'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote']
ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title', 'target'],
    '*': ['class']  # Allow class attribute on all allowed tags
}
ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']


def sanitize_html(content):
    """Sanitize HTML content to prevent XSS attacks"""
    if not content:
        return ''

    clean_content = bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True  # Strip disallowed tags rather than escaping them
    )

    # Return as Markup so Jinja2 doesn't escape it again
    return Markup(clean_content)


def _wants_json():
    return request.path.startswith('/api/') or (
        request.accept_mimetypes.accept_json and not request.accept_mimetypes.accept_html
    )


# ========================================
# Application Factory
# ========================================

def create_app(settings: dict = None, services: AppServices = None) -> Flask:
    """
    Build the Flask app.

    Args:
        settings: Settings mapping (defaults to load_settings() from the environment)
        services: Prebuilt service container; tests pass one with fakes injected
    """
    settings = settings or load_settings()
    services = services or AppServices(settings)

    app = Flask(__name__)
    app.config.update(settings)
    app.extensions[EXTENSION_KEY] = services

    CORS(app, supports_credentials=True, origins=build_cors_origins(settings))

    # Initialize database on startup
    services.database.init_db()
    if settings.get('SEED_TEAM', True):
        try:
            services.team.seed_if_empty()
        except Exception as e:
            # Don't crash the app if seeding fails; another worker may have won the race
            logger.error(f"Error seeding team members: {e}")

    _register_template_helpers(app, settings)
    _register_blueprints(app)
    _register_security_headers(app, settings)
    _register_error_handlers(app, settings)

    # Health check
    @app.route('/health')
    @app.route('/api/health')
    def health():
        """Health check endpoint"""
        return jsonify({
            'status': 'ok',
            'service': 'PDSCC Application',
            'version': APP_VERSION,
            'timestamp': datetime.now().isoformat()
        })

    return app


def _register_template_helpers(app, settings):
    @app.context_processor
    def inject_app_config():
        """Site settings every template needs"""
        return {
            'site_base_url': settings.get('SITE_BASE_URL', ''),
            'current_year': datetime.now().year,
            'is_debug': settings.get('DEBUG', False)
        }

    @app.template_filter('safe_html')
    def safe_html_filter(content):
        """Jinja2 filter to sanitize HTML content"""
        return sanitize_html(content)


# ========================================
# Import and Register Blueprints
# ========================================

def _register_blueprints(app):
    from routes_pages import pages_bp
    from routes_api_auth import auth_api_bp
    from routes_api_blog import blog_api_bp
    from routes_api_chat import chat_api_bp
    from routes_api_contact import contact_bp
    from routes_api_cron import cron_api_bp
    from routes_api_events import events_api_bp
    from routes_api_sponsors import sponsors_api_bp
    from routes_api_team import team_api_bp
    from routes_api_vendors import vendors_api_bp

    app.register_blueprint(pages_bp)
    app.register_blueprint(auth_api_bp)
    app.register_blueprint(blog_api_bp)
    app.register_blueprint(chat_api_bp)
    app.register_blueprint(contact_bp)
    app.register_blueprint(cron_api_bp)
    app.register_blueprint(events_api_bp)
    app.register_blueprint(sponsors_api_bp)
    app.register_blueprint(team_api_bp)
    app.register_blueprint(vendors_api_bp)


# ========================================
# Response headers
# ========================================

NO_CACHE_HEADERS = {
    'Cache-Control': 'no-cache, no-store, must-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
}

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Permissions-Policy': 'geolocation=(), microphone=(), camera=()',
}


def build_csp(settings) -> str:
    """Content-Security-Policy for the rendered pages and the chat widget"""
    connect_sources = ["'self'"] + [o for o in build_cors_origins(settings) if o and o.startswith('http')]
    site_origin = _origin_from_url(settings.get('SITE_BASE_URL'))
    if site_origin:
        connect_sources.append(site_origin)

    directives = {
        'default-src': ["'self'"],
        'script-src': ["'self'", 'https://cdn.jsdelivr.net'],
        'style-src': ["'self'", "'unsafe-inline'", 'https://fonts.googleapis.com'],
        'font-src': ["'self'", 'https://fonts.gstatic.com'],
        'connect-src': list(dict.fromkeys(connect_sources)),
        'img-src': ["'self'", 'data:', 'https:'],
        'frame-src': ['https://www.google.com', 'https://maps.google.com', 'https://www.youtube.com'],
        'object-src': ["'none'"],
    }
    return '; '.join(f"{name} {' '.join(values)}" for name, values in directives.items()) + ';'


def _register_security_headers(app, settings):
    csp = build_csp(settings)
    use_hsts = not settings.get('DEBUG')

    @app.after_request
    def add_security_headers(response):
        # Views that set their own caching policy keep it
        if 'Cache-Control' not in response.headers:
            response.headers.update(NO_CACHE_HEADERS)
        response.headers.update(SECURITY_HEADERS)
        response.headers['Content-Security-Policy'] = csp
        if use_hsts and request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response


# ========================================
# Error Handlers
# ========================================

def _register_error_handlers(app, settings):
    debug = settings.get('DEBUG', False)

    @app.errorhandler(ValidationError)
    def validation_error(e):
        """Request bodies that fail their schema; nothing external has been called yet"""
        return jsonify({
            'success': False,
            'error': 'Please correct the highlighted fields.',
            'errors': field_errors(e)
        }), 400

    @app.errorhandler(PDSCCError)
    def application_error(e):
        status = status_for(e)
        if isinstance(e, NotFoundError) and not _wants_json():
            return not_found(e)

        if isinstance(e, ConfigurationError):
            logger.error(f"Service not configured: {e}")
            message = str(e) if isinstance(e, AINotConfiguredError) else 'This service is not configured. Please try again later.'
        else:
            logger.error(f"{type(e).__name__}: {e}")
            message = str(e)

        if not _wants_json():
            return render_template('500.html', error=message if debug else None), status
        return jsonify({'success': False, 'error': message}), status

    @app.errorhandler(404)
    def not_found(e):
        """Handle 404 errors - return HTML for pages, JSON for API"""
        if _wants_json():
            return jsonify({
                'success': False,
                'error': 'Endpoint not found'
            }), 404
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def internal_error(e):
        """Handle 500 errors - return HTML for pages, JSON for API"""
        logger.error(f"Internal server error: {e}", exc_info=True)
        if _wants_json():
            return jsonify({
                'success': False,
                'error': 'Internal server error'
            }), 500
        try:
            return render_template('500.html', error=str(e) if debug else None), 500
        except Exception:
            return "<h1>500 - Server Error</h1><p>Something went wrong on our end. Please try again later.</p><a href='/'>Go Home</a>", 500


# ========================================
# Application Entry Point
# ========================================

if __name__ == '__main__':
    app = create_app()
    port = app.config['PORT']
    logger.info(f"PDSCC backend {APP_VERSION} on http://localhost:{port} (debug={app.config['DEBUG']})")
    app.run(debug=app.config['DEBUG'], host='0.0.0.0', port=port)
