# config/settings.py
"""
Environment-derived application settings

Loaded once at startup into an immutable AppConfig and handed to the
application factory and mail dispatcher.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv


def parse_origins(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated origin list, trimming and dropping empty entries"""
    return tuple(s.strip() for s in (raw or '').split(',') if s.strip())


def _flag(value: Optional[str]) -> bool:
    return value == 'true'


def _number(environ: Mapping[str, str], name: str, default, cast=int):
    raw = environ.get(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class AppConfig:
    """Process-wide configuration, immutable after load"""

    port: int = 4000
    cors_origins: Tuple[str, ...] = field(default_factory=tuple)

    # SMTP relay
    mail_host: str = ''
    mail_port: int = 587
    mail_secure: bool = False
    mail_user: str = ''
    mail_pass: str = ''
    mail_to: str = ''
    mail_timeout: float = 10.0
    mail_from_name: str = 'Portfolio Contact'

    # Rate limiting
    contact_rate_limit: str = '5 per minute'
    ratelimit_storage_uri: str = 'memory://'

    trust_proxy: bool = False
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AppConfig':
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from. Defaults to os.environ after
                loading a .env file from the working directory.

        Returns:
            AppConfig with documented defaults for anything unset
        """
        if environ is None:
            load_dotenv(override=False)
            environ = os.environ

        return cls(
            port=_number(environ, 'PORT', 4000),
            cors_origins=parse_origins(environ.get('CORS_ORIGINS')),
            mail_host=environ.get('MAIL_HOST', ''),
            mail_port=_number(environ, 'MAIL_PORT', 587),
            mail_secure=_flag(environ.get('MAIL_SECURE')),
            mail_user=environ.get('MAIL_USER', ''),
            mail_pass=environ.get('MAIL_PASS', ''),
            mail_to=environ.get('MAIL_TO', ''),
            mail_timeout=_number(environ, 'MAIL_TIMEOUT', 10.0, float),
            mail_from_name=environ.get('MAIL_FROM_NAME') or 'Portfolio Contact',
            contact_rate_limit=environ.get('CONTACT_RATE_LIMIT') or '5 per minute',
            ratelimit_storage_uri=environ.get('RATELIMIT_STORAGE_URI') or 'memory://',
            trust_proxy=_flag(environ.get('TRUST_PROXY')),
            log_level=(environ.get('LOG_LEVEL') or 'INFO').upper(),
        )
