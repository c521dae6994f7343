import os
import pytest
import sys

# Add backend directory to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))

from marketguard.app import create_app
from marketguard.utils.sanitizer import configure_html_sanitizer


@pytest.fixture()
def app():
    """Create and configure a new app instance for each test."""
    flask_app, limiter = create_app('testing')
    flask_app.config.update(TESTING=True)
    yield flask_app
    configure_html_sanitizer("bleach")


@pytest.fixture()
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture()
def base_listing():
    return {
        "title": "Test iPhone 15",
        "description": "Perfect condition with original box.",
        "price": 50000,
        "category_id": "mobiles",
        "condition": "like_new",
        "city": "Port Blair",
        "contact_preferences": {"chat": True, "phone": False, "whatsapp": False},
    }
