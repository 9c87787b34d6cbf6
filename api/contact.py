# api/contact.py
"""
Contact form API

POST /api/contact validates the submission, truncates its fields and relays
it by email. The whole blueprint sits behind a per-address rate limit.
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from core.contact import ContactValidationError, parse_submission
from services.mailer import MailDeliveryError

contact_bp = Blueprint('contact', __name__)
logger = logging.getLogger(__name__)

# Rate limiter, bound to the app in create_app; no default limits elsewhere.
# Only POST counts, CORS preflights pass through unmetered
limiter = Limiter(key_func=get_remote_address)

RATE_LIMIT_MESSAGE = 'Too many requests from this IP, please try again after a minute.'

limiter.limit(
    lambda: current_app.config['CONTACT_RATE_LIMIT'],
    error_message=RATE_LIMIT_MESSAGE,
    methods=['POST'],
)(contact_bp)


def read_json_body():
    """
    Decode the request body as JSON

    Non-JSON content types and empty bodies give an empty dict. Malformed
    JSON raises BadRequest; bodies over MAX_CONTENT_LENGTH raise
    RequestEntityTooLarge.
    """
    if not request.is_json or not request.get_data(cache=True):
        return {}
    payload = request.get_json()
    return payload if isinstance(payload, dict) else {}


@contact_bp.errorhandler(ContactValidationError)
def handle_validation_error(error: ContactValidationError):
    logger.info(f"Rejected contact submission from {request.remote_addr}: {error.message}")
    return jsonify({'error': error.message}), error.status_code


@contact_bp.route('/api/contact', methods=['POST'])
async def submit_contact():
    """
    Relay a contact form submission by email

    Returns:
        200 {"ok": true, "messageId": ...} once the relay accepts the message,
        400 on validation failure, 500 if delivery fails
    """
    submission = parse_submission(read_json_body())
    dispatcher = current_app.extensions['mail_dispatcher']

    try:
        result = await dispatcher.send(submission)
    except MailDeliveryError as e:
        logger.error(f"Email send failed: {e} {e.diagnostics}")
        return jsonify({'error': 'Failed to send message.'}), 500

    return jsonify({'ok': True, 'messageId': result.message_id})
