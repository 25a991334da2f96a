# middleware/security.py
"""
Security Middleware for Request Processing
"""

from flask import current_app, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from functools import wraps
import logging

logger = logging.getLogger(__name__)


def application_rate_limit():
    return current_app.config['APPLICATION_RATE_LIMIT']


# Bound to the application in create_app(); limits come from app config
limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[application_rate_limit]
)


def security_headers(response):
    """Add security headers to all responses"""
    for header, value in current_app.config.get('SECURITY_HEADERS', {}).items():
        response.headers.setdefault(header, value)
    return response


def get_client_ip():
    """Client address; ProxyFix rewrites remote_addr behind a proxy in production"""
    return request.remote_addr


def contact_rate_limit():
    return current_app.config['CONTACT_RATE_LIMIT']


def contact_rate_limit_message():
    return current_app.config['CONTACT_RATE_LIMIT_MESSAGE']


def require_admin(f):
    """
    Guard admin endpoints with the deployer-supplied ADMIN_AUTHORIZER.

    The authorizer is a callable taking the current request and returning
    True to allow it. Without one the endpoint is open.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        authorizer = current_app.config.get('ADMIN_AUTHORIZER')
        if authorizer is not None and not authorizer(request):
            logger.warning(f"Admin access denied for {get_client_ip()} on {request.path}")
            return jsonify({
                'error': 'Forbidden',
                'details': 'You are not allowed to access this resource.'
            }), 403
        return f(*args, **kwargs)
    return decorated_function
