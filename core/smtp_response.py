# SMTP failure categorisation based on RFC 5321 reply code classes
# Used to attach diagnostics to delivery failure logs

from enum import Enum
from typing import Any, Dict, Optional

import aiosmtplib


class ResponseCategory(Enum):
    """SMTP Response Categories based on RFC 5321"""
    SUCCESS = "success"
    TEMP_FAIL = "temp_fail"
    PERM_FAIL = "perm_fail"
    UNKNOWN = "unknown"


# Keyword hints checked against the server's reply text, first match wins
SUBCATEGORY_KEYWORDS = (
    ('authentication', ('auth', 'login', 'credential', 'password')),
    ('invalid_recipient', ('not found', 'unknown', 'invalid', 'does not exist')),
    ('mailbox_full', ('full', 'quota', 'storage')),
    ('spam_policy', ('spam', 'blocked', 'blacklist', 'reputation')),
    ('policy_violation', ('policy', 'violation', 'prohibited', 'denied')),
)


def categorize_code(code: Optional[int]) -> ResponseCategory:
    if code is None:
        return ResponseCategory.UNKNOWN
    if 200 <= code < 400:
        return ResponseCategory.SUCCESS
    if 400 <= code < 500:
        return ResponseCategory.TEMP_FAIL
    if 500 <= code < 600:
        return ResponseCategory.PERM_FAIL
    return ResponseCategory.UNKNOWN


def subcategorize(message: str, exc: Optional[BaseException] = None) -> Optional[str]:
    if isinstance(exc, aiosmtplib.SMTPAuthenticationError):
        return 'authentication'
    if isinstance(exc, (aiosmtplib.SMTPRecipientsRefused, aiosmtplib.SMTPRecipientRefused)):
        return 'invalid_recipient'
    if isinstance(exc, aiosmtplib.SMTPTimeoutError):
        return 'timeout'
    if isinstance(exc, (aiosmtplib.SMTPConnectError, aiosmtplib.SMTPServerDisconnected, OSError)):
        return 'connection'

    message_lower = message.lower()
    for subcategory, keywords in SUBCATEGORY_KEYWORDS:
        if any(keyword in message_lower for keyword in keywords):
            return subcategory
    return None


def describe_failure(exc: BaseException) -> Dict[str, Any]:
    """
    Extract structured diagnostics from a transport exception

    Returns a dict with the SMTP reply code and text (when the server sent
    one), the RFC 5321 category, a coarse subcategory and the exception type.
    """
    code = None
    message = str(exc)

    if isinstance(exc, aiosmtplib.SMTPRecipientsRefused) and exc.recipients:
        # Report the first refusal; all recipients share one relay here
        refused = exc.recipients[0]
        code, message = refused.code, refused.message
    elif isinstance(exc, aiosmtplib.SMTPResponseException):
        code, message = exc.code, exc.message

    return {
        'error_type': type(exc).__name__,
        'smtp_code': code,
        'smtp_message': message,
        'category': categorize_code(code).value,
        'subcategory': subcategorize(message, exc),
    }
