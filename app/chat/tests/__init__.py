"""
Tests for chat app.

This package contains test modules for:
- test_services.py: ChatService and MessageService tests
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_services.py
"""
