# middleware/security.py
"""
Security Middleware for Request Processing
"""

import logging
from typing import Callable, Iterable

from flask import current_app, request
from werkzeug.exceptions import Forbidden

from config.security import SecurityConfig, build_csp

logger = logging.getLogger(__name__)


class OriginNotAllowed(Forbidden):
    """Raised when a request carries an Origin outside the allow-list"""

    description = 'CORS policy does not allow this origin.'

    def __init__(self, origin: str):
        super().__init__()
        self.origin = origin


def security_headers(response):
    """Add security headers to all responses"""
    headers = current_app.config.get('SECURITY_HEADERS', SecurityConfig.SECURITY_HEADERS)
    policy = current_app.config.get('CSP_POLICY', SecurityConfig.CSP_POLICY)

    response.headers['Content-Security-Policy'] = build_csp(policy)
    for name, value in headers.items():
        response.headers[name] = value
    response.headers.pop('X-Powered-By', None)

    return response


def origin_policy(allowed_origins: Iterable[str]) -> Callable[[], None]:
    """
    Build a before_request hook enforcing the origin allow-list

    Requests without an Origin header (curl, server-to-server) pass through.
    Allow-listed origins pass and get CORS headers from Flask-CORS; anything
    else is rejected with OriginNotAllowed.
    """
    allowed = frozenset(allowed_origins)

    def check_origin():
        origin = request.headers.get('Origin')
        if not origin or origin in allowed:
            return None

        logger.warning(f"Rejected origin {origin} for {request.method} {request.path} from {request.remote_addr}")
        raise OriginNotAllowed(origin)

    return check_origin
