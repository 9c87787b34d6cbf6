# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets up environment variables before app.py is imported (it builds the
# WSGI application at import time) and provides app, client and SMTP fakes.
# =============================================================================

import os

os.environ.setdefault("MAIL_HOST", "smtp.test.local")
os.environ.setdefault("MAIL_USER", "relay@example.com")
os.environ.setdefault("MAIL_TO", "owner@example.com")
os.environ.setdefault("CORS_ORIGINS", "https://portfolio.example.com")

from unittest.mock import AsyncMock

import pytest

from api.contact import limiter
from app import create_app
from config.settings import AppConfig


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config():
    """Configuration with a single allowed origin and a fake relay."""
    return AppConfig(
        port=4000,
        cors_origins=("https://portfolio.example.com", "http://localhost:5173"),
        mail_host="smtp.test.local",
        mail_port=587,
        mail_secure=False,
        mail_user="relay@example.com",
        mail_pass="secret",
        mail_to="owner@example.com",
    )


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    limiter.reset()
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def smtp_send(monkeypatch):
    """Replace aiosmtplib.send with an accepting fake."""
    send = AsyncMock(return_value=({}, "250 2.0.0 OK queued"))
    monkeypatch.setattr("services.mailer.aiosmtplib.send", send)
    return send


@pytest.fixture
def valid_payload():
    return {
        "name": "Ada",
        "email": "ada@example.com",
        "message": "Hello\nWorld",
    }
