"""
Initial schema for consulting chats.

Tables:
    - chat_conversation: One row per (user, stylist) pair
    - chat_message: Messages with a user/stylist sender discriminator
"""

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("authentication", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Conversation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
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
                    "stylist",
                    models.ForeignKey(
                        help_text="Stylist in this conversation",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="conversations",
                        to="authentication.stylist",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Consulting client in this conversation",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="conversations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_conversation",
                "ordering": ["-updated_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["stylist", "-updated_at"],
                        name="chat_conv_stylist_recent_idx",
                    ),
                    models.Index(
                        fields=["user", "-updated_at"],
                        name="chat_conv_user_recent_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "stylist"),
                        name="unique_conversation_per_pair",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
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
                    "content",
                    models.CharField(help_text="Message text", max_length=1000),
                ),
                (
                    "is_from_user",
                    models.BooleanField(
                        help_text="Whether the user (rather than the stylist) wrote this message"
                    ),
                ),
                (
                    "conversation",
                    models.ForeignKey(
                        help_text="Conversation this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.conversation",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        blank=True,
                        help_text="Authoring user (null for stylist messages)",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sent_chat_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "stylist_sender",
                    models.ForeignKey(
                        blank=True,
                        help_text="Authoring stylist (null for user messages)",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sent_chat_messages",
                        to="authentication.stylist",
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["conversation", "created_at", "id"],
                        name="chat_msg_conv_created_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("is_from_user", True),
                                ("sender__isnull", False),
                                ("stylist_sender__isnull", True),
                            ),
                            models.Q(
                                ("is_from_user", False),
                                ("sender__isnull", True),
                                ("stylist_sender__isnull", False),
                            ),
                            _connector="OR",
                        ),
                        name="chat_message_sender_matches_kind",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("content", ""), _negated=True),
                        name="chat_message_content_not_empty",
                    ),
                ],
            },
        ),
    ]
