"""
Constants and configuration for the chat module.

This module centralizes configuration values for:
- Message content limits
- Realtime gateway groups, events and close codes

Group names can be overridden through the ``CHAT`` block in Django settings:

    CHAT = {
        "ROOM_GROUP_PREFIX": "chat",
        "NOTIFICATION_GROUP": "chat-notifications",
    }

Import example:
    from chat.constants import MESSAGE_CONFIG, SOCKET_CONFIG, room_group_name
"""

from typing import Final

from django.conf import settings


def _chat_setting(name: str, default):
    return getattr(settings, "CHAT", {}).get(name, default)


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message content."""

    # Enforced by serializers and by a column limit on Message.content
    MAX_CONTENT_LENGTH: Final[int] = 1000  # Characters
    MIN_CONTENT_LENGTH: Final[int] = 1


# =============================================================================
# Realtime Gateway Configuration
# =============================================================================


class SOCKET_CONFIG:
    """Configuration for the WebSocket gateway."""

    # Sent before closing a socket whose handshake token was rejected
    AUTH_FAILURE_CLOSE_CODE: Final[int] = 4001

    # Subprotocol clients may use to carry the token: ["jwt", "<token>"]
    TOKEN_SUBPROTOCOL: Final[str] = "jwt"


class ClientEvent:
    """Commands accepted from clients."""

    JOIN_CHAT: Final[str] = "joinChat"
    LEAVE_CHAT: Final[str] = "leaveChat"
    SEND_MESSAGE: Final[str] = "sendMessage"


class ServerEvent:
    """Events emitted to clients."""

    CONNECTED: Final[str] = "connected"
    JOINED_CHAT: Final[str] = "joinedChat"
    LEFT_CHAT: Final[str] = "leftChat"
    NEW_MESSAGE: Final[str] = "newMessage"
    SYSTEM_MESSAGE: Final[str] = "systemMessage"
    NOTIFICATION: Final[str] = "notification"
    ERROR: Final[str] = "error"


def room_group_name(chat_id: int) -> str:
    """Channel layer group for one conversation, e.g. ``chat-42``."""
    prefix = _chat_setting("ROOM_GROUP_PREFIX", "chat")
    return f"{prefix}-{chat_id}"


def notification_group_name() -> str:
    """Channel layer group every authenticated connection joins."""
    return _chat_setting("NOTIFICATION_GROUP", "chat-notifications")
