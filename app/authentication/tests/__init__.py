"""
Tests for authentication app.

- test_managers.py: UserManager tests
- test_views.py: login and current-user endpoint tests

Usage:
    pytest authentication/tests/
"""
