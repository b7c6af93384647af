"""
Root pytest configuration for the Django project.

This module configures pytest-django and provides project-wide hooks.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django
import pytest

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # The test client speaks plain HTTP
    settings.SECURE_SSL_REDIRECT = False


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_services.py, test_consumers.py, etc. → integration
    - registry and parser tests (test_sessions.py, test_events.py, ...) → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_consumers.py",
        "test_receivers.py",
        "test_middleware.py",
    ]

    unit_patterns = [
        "test_managers.py",
        "test_sessions.py",
        "test_presence.py",
        "test_rooms.py",
        "test_typing_state.py",
        "test_events.py",
        "test_records.py",
        "test_relay.py",
        "test_lifecycle.py",
    ]

    for item in items:
        # Skip if test already has unit/integration marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)
