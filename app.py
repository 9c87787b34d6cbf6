# app.py
"""
Flask Application Factory for the Contact Relay Backend

Wires the request pipeline in order:
- Security headers on every response
- JSON body parsing capped at 200 KB
- Origin allow-list with credentialed CORS headers
- Per-address rate limiting on the contact endpoint

and registers the status and contact blueprints plus JSON error handlers.
"""

import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from api.contact import contact_bp, limiter
from api.status import status_bp
from config.security import SecurityConfig
from config.settings import AppConfig
from middleware.security import OriginNotAllowed, origin_policy, security_headers
from services.mailer import MailDispatcher


def setup_logging(app: Flask, config: AppConfig) -> None:
    """
    Configure process logging to stderr

    Module loggers propagate to the root logger; Flask's default handler is
    removed to avoid duplicate lines.
    """
    app.logger.handlers.clear()

    log_level = getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s %(name)-20s %(levelname)-8s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    app.logger.setLevel(log_level)

    # Suppress per-request access lines outside debug
    if not app.debug:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)


def configure_security(app: Flask, config: AppConfig) -> None:
    """
    Configure origin policy, CORS headers and rate limiting

    The origin check is registered before the limiter so rejected origins
    do not consume rate limit budget.
    """
    app.before_request(origin_policy(config.cors_origins))

    CORS(app,
         origins=list(config.cors_origins),
         supports_credentials=True,
         always_send=False)

    limiter.init_app(app)

    app.after_request(security_headers)

    app.logger.info(f"Security features configured, allowed origins: {list(config.cors_origins)}")


def register_blueprints(app: Flask) -> None:
    app.register_blueprint(status_bp)
    app.register_blueprint(contact_bp)


def configure_error_handlers(app: Flask) -> None:
    """
    Map HTTP errors to JSON bodies of the form {"error": message}
    """
    @app.errorhandler(400)
    def bad_request(error):
        app.logger.warning(f"Bad request from {request.remote_addr}: {error}")
        return jsonify({'error': 'Malformed JSON body.'}), 400

    @app.errorhandler(403)
    def forbidden(error):
        if isinstance(error, OriginNotAllowed):
            return jsonify({'error': error.description}), 403
        return jsonify({'error': 'Forbidden.'}), 403

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found.'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed.'}), 405

    @app.errorhandler(413)
    def payload_too_large(error):
        app.logger.warning(f"Oversized body from {request.remote_addr} on {request.path}")
        return jsonify({'error': 'Request body too large.'}), 413

    @app.errorhandler(429)
    def rate_limit_exceeded(error):
        app.logger.warning(f"Rate limit exceeded for {request.remote_addr} on {request.path}")
        return jsonify({'error': error.description}), 429

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error.'}), 500

    @app.errorhandler(Exception)
    def handle_exception(e):
        """Handle unexpected exceptions"""
        if isinstance(e, HTTPException):
            return e

        app.logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({'error': 'Internal server error.'}), 500


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Flask application factory

    Args:
        config: Loaded configuration. Read from the environment when omitted.

    Returns:
        Configured Flask application instance
    """
    config = config or AppConfig.from_env()

    app = Flask(__name__)
    app.config.from_object(SecurityConfig)
    app.config.update({
        'RATELIMIT_STORAGE_URI': config.ratelimit_storage_uri,
        'CONTACT_RATE_LIMIT': config.contact_rate_limit,
    })

    if config.trust_proxy:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    setup_logging(app, config)

    app.extensions['app_config'] = config
    app.extensions['mail_dispatcher'] = MailDispatcher(config)
    if not config.mail_host:
        app.logger.warning("MAIL_HOST is not set, contact submissions will fail to send")

    configure_security(app, config)
    register_blueprints(app)
    configure_error_handlers(app)

    return app


# Production WSGI application
application = create_app()

if __name__ == '__main__':
    port = application.extensions['app_config'].port
    application.logger.info(f"Backend running on port {port}")
    application.run(host='0.0.0.0', port=port)
