"""
Model mixins shared by the persisted chat store.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key

Usage:
    from core.models import BaseModel
    from core.model_mixins import UUIDPrimaryKeyMixin

    class Chat(UUIDPrimaryKeyMixin, BaseModel):
        chat_name = models.CharField(max_length=100)

Note:
    Always list mixins before BaseModel in inheritance.
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of an auto-increment integer.

    The realtime layer addresses users, chats and messages by opaque string
    identifiers on the wire; UUID keys serialize to exactly that and do not
    leak record counts to clients.

    Fields:
        id: UUIDField as primary key (auto-generated)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True
