import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Chat",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "chat_name",
                    models.CharField(help_text="Display name of the chat", max_length=100),
                ),
                (
                    "is_group_chat",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Whether this is a group chat",
                    ),
                ),
                (
                    "avatar",
                    models.URLField(
                        blank=True,
                        default="",
                        help_text="Avatar URL for group chats",
                    ),
                ),
                (
                    "group_admin",
                    models.ForeignKey(
                        blank=True,
                        help_text="Admin of the group chat (null for direct chats)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="administered_chats",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "users",
                    models.ManyToManyField(
                        help_text="Users participating in this chat",
                        related_name="chats",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_chat",
                "ordering": ["-updated_at"],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "content",
                    models.TextField(blank=True, default="", help_text="Message text"),
                ),
                (
                    "is_file_message",
                    models.BooleanField(
                        default=False,
                        help_text="Whether this message carries a file",
                    ),
                ),
                (
                    "file_url",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="URL of the attached file",
                        max_length=500,
                    ),
                ),
                (
                    "file_type",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="MIME type of the attached file",
                        max_length=100,
                    ),
                ),
                (
                    "file_name",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Original name of the attached file",
                        max_length=255,
                    ),
                ),
                (
                    "attachments",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Additional attachment URLs",
                    ),
                ),
                (
                    "chat",
                    models.ForeignKey(
                        help_text="Chat this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.chat",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        help_text="User who sent this message",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sent_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "read_by",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Users who have read this message",
                        related_name="read_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["chat", "-created_at"],
                        name="chat_msg_chat_created_idx",
                    ),
                    models.Index(fields=["sender"], name="chat_msg_sender_idx"),
                ],
            },
        ),
        migrations.AddField(
            model_name="chat",
            name="latest_message",
            field=models.ForeignKey(
                blank=True,
                help_text="Most recent message in this chat",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="chat.message",
            ),
        ),
    ]
