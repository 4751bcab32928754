"""
Chat application configuration.

This app provides consulting chats between users and stylists:
- One conversation per (user, stylist) pair
- REST endpoints per party kind
- WebSocket gateway with per-conversation rooms
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
