"""
Tests for core app.

This package contains test modules for:
- test_services.py: ServiceResult and BaseService
- test_views.py: Health check endpoint
"""
