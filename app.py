import json
import logging
from functools import wraps

from flask import Blueprint, Flask, current_app, g, jsonify, request
from flask_cors import CORS
from flask_talisman import Talisman
from werkzeug.exceptions import HTTPException

from api_integrations import cache
from config import Config
from errors import CreatorKitError, RateLimitExceeded
from features import FEATURES
from models import UsageData
from rate_limiter import FixedWindowRateLimiter

# Both deployment layouts the web client knows about
ROUTE_PREFIXES = {
    'api': '/api',
    'netlify': '/.netlify/functions',
}

CORS_METHODS = ['GET', 'POST', 'OPTIONS']
CORS_HEADERS = ['Content-Type', 'Authorization']


def setup_logging():
    """Configure application logging."""
    log_level = Config.LOG_LEVEL
    log_file = Config.LOG_FILE

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

setup_logging()
logger = logging.getLogger(__name__)


def client_key():
    """Identify the caller by IP, preferring the edge network's headers."""
    for header in ('CF-Connecting-IP', 'X-Nf-Client-Connection-Ip'):
        value = request.headers.get(header)
        if value:
            return value.strip()

    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()

    return request.remote_addr or 'unknown'


def request_body():
    """Parse the JSON body leniently; anything but an object becomes {}."""
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def rate_limit(func):
    """Rate limiting decorator for API endpoints."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        limiter = current_app.extensions['rate_limiter']
        result = limiter.check(client_key())
        g.rate_limit = result
        if not result.allowed:
            raise RateLimitExceeded(result.retry_after)
        return func(*args, **kwargs)
    return wrapper


def feature_view(handler):
    """Wrap a feature handler as a POST-only JSON endpoint."""
    @rate_limit
    def view():
        current_app.extensions['usage'].increment()
        return jsonify(handler(request_body()))
    view.__name__ = handler.__name__
    view.__doc__ = handler.__doc__
    return view


api = Blueprint('api', __name__)

for name, handler in FEATURES.items():
    api.add_url_rule(f'/{name}', endpoint=name, view_func=feature_view(handler), methods=['POST'])


def register_hooks(app):
    @app.before_request
    def log_request_info():
        """Log information about incoming requests."""
        logger.info(f'Request: {request.method} {request.url}')

        # Only log detailed info for non-production environments
        if app.config.get('FLASK_ENV') != 'production' and request.method == 'POST':
            logger.debug(f'Body: {request.get_data(as_text=True)[:500]}')

    @app.after_request
    def add_response_headers(response):
        """Rate-limit and legacy XSS headers; Talisman and CORS add the rest."""
        result = g.get('rate_limit')
        if result is not None:
            response.headers.update(result.headers())
        response.headers['X-XSS-Protection'] = '1; mode=block'
        # flask-cors only sends these on preflight
        if request.method != 'OPTIONS':
            response.headers['Access-Control-Allow-Methods'] = ', '.join(CORS_METHODS)
            response.headers['Access-Control-Allow-Headers'] = ', '.join(CORS_HEADERS)
        logger.info(f'Response: {response.status}')
        return response

    @app.errorhandler(CreatorKitError)
    def handle_api_error(e):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__} on {request.path}: {e.message}")
        else:
            logger.warning(f"{type(e).__name__} on {request.path}: {e.message}")
        response = jsonify(e.to_dict())
        response.status_code = e.status_code
        if isinstance(e, RateLimitExceeded):
            response.headers['Retry-After'] = str(e.retry_after)
        return response

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        message = 'Method not allowed' if e.code == 405 else e.name
        # Keep Werkzeug's headers, e.g. Allow on a 405
        response = e.get_response()
        response.data = json.dumps({'error': message})
        response.content_type = 'application/json'
        return response

    @app.errorhandler(Exception)
    def handle_exception(e):
        """Global exception handler for all routes."""
        logger.error(f"Unhandled exception: {str(e)}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again in a moment.'}), 500


def register_routes(app):
    @app.route('/')
    def home():
        """Describe the service and list the feature endpoints."""
        return jsonify({
            'service': 'CreatorKit API',
            'endpoints': [f"{ROUTE_PREFIXES['api']}/{name}" for name in FEATURES],
        })

    @app.route('/stats', methods=['GET'])
    def get_stats():
        """Get basic usage statistics."""
        day, count = app.extensions['usage'].snapshot()
        return jsonify({
            'date': day.isoformat(),
            'daily_usage': count,
            'tracked_clients': app.extensions['rate_limiter'].tracked_keys,
        })


def create_app(overrides=None):
    """Build the Flask app from Config, with optional overrides (tests)."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Security headers; HTTPS redirect only where the edge does not terminate TLS
    Talisman(
        app,
        force_https=app.config['FORCE_HTTPS'],
        frame_options='DENY',
        referrer_policy='strict-origin-when-cross-origin',
        content_security_policy={'default-src': "'none'", 'frame-ancestors': "'none'"},
        session_cookie_secure=app.config['FORCE_HTTPS'],
    )
    CORS(
        app,
        origins='*',
        send_wildcard=True,
        methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=['X-RateLimit-Remaining', 'Retry-After'],
    )
    cache.init_app(app)

    app.extensions['rate_limiter'] = FixedWindowRateLimiter(
        limit=app.config['RATE_LIMIT_REQUESTS'],
        window=app.config['RATE_LIMIT_WINDOW'],
        max_keys=app.config['RATE_LIMIT_MAX_KEYS'],
    )
    app.extensions['usage'] = UsageData()

    for name, prefix in ROUTE_PREFIXES.items():
        app.register_blueprint(api, url_prefix=prefix, name=name)

    register_hooks(app)
    register_routes(app)

    if not app.config.get('GROQ_API_KEY'):
        logger.warning("GROQ_API_KEY is not set; feature endpoints will return 500")

    return app


app = create_app()

if __name__ == '__main__':
    port = app.config['PORT']
    debug = app.config['FLASK_ENV'] == 'development'

    app.run(host='0.0.0.0', port=port, debug=debug)
