# core/contact.py
"""
Contact form submission validation and sanitisation
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 5000


class ContactValidationError(Exception):
    """Base exception for rejected contact submissions"""

    status_code = 400
    message = 'Invalid contact submission.'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class MissingFieldsError(ContactValidationError):
    """One of name, email or message is absent or empty"""

    message = 'name, email, and message are required.'


class InvalidEmailError(ContactValidationError):
    """Email address does not look like local@domain.tld"""

    message = 'Invalid email address.'


@dataclass(frozen=True)
class ContactSubmission:
    """Validated, truncated contact form fields"""

    name: str
    email: str
    message: str


def is_email(value: Any = '') -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def clamp(value: Any = '', limit: int = 1000) -> str:
    """Coerce to str and truncate to at most `limit` characters"""
    return str(value)[:limit]


def parse_submission(payload: Optional[Dict[str, Any]]) -> ContactSubmission:
    """
    Validate a raw JSON payload and build a ContactSubmission

    Args:
        payload: Decoded request body. None or a non-dict is treated as empty.

    Returns:
        ContactSubmission with every field truncated to its cap

    Raises:
        MissingFieldsError: a required field is falsy
        InvalidEmailError: email fails the format check
    """
    if not isinstance(payload, dict):
        payload = {}

    name = payload.get('name')
    email = payload.get('email')
    message = payload.get('message')

    if not name or not email or not message:
        raise MissingFieldsError()
    if not is_email(email):
        raise InvalidEmailError()

    return ContactSubmission(
        name=clamp(name, NAME_MAX_LENGTH),
        email=clamp(email, EMAIL_MAX_LENGTH),
        message=clamp(message, MESSAGE_MAX_LENGTH),
    )
