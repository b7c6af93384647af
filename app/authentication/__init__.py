"""
Authentication application.

Provides the custom email-based User model whose UUID primary key is the user
identity used by chats and by the realtime session registry.

Usage:
    from authentication.models import User
"""
