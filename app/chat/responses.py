"""
Frame builders for the chat WebSocket protocol.

Every frame sent to a client is an envelope ``{"type": <event>, "data": {...}}``.
Payload keys are camelCase, matching what the browser clients consume.

Usage:
    from chat import responses

    await self.send_json(responses.joined_chat(chat_id))
    await self.send_json(responses.error("Chat not found", "NOT_FOUND"))
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from django.utils import timezone

from chat.constants import ServerEvent

if TYPE_CHECKING:
    from chat.models import Message


def envelope(event: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"type": event, "data": data}


def _timestamp(value: datetime) -> str:
    return value.isoformat()


def connected(user_id: int, user_type: str) -> dict[str, Any]:
    return envelope(
        ServerEvent.CONNECTED,
        {
            "message": "Connected to chat server",
            "userId": user_id,
            "userType": str(user_type),
        },
    )


def joined_chat(chat_id: int) -> dict[str, Any]:
    return envelope(
        ServerEvent.JOINED_CHAT,
        {"chatId": chat_id, "message": "Successfully joined chat room"},
    )


def left_chat(chat_id: int) -> dict[str, Any]:
    return envelope(
        ServerEvent.LEFT_CHAT,
        {"chatId": chat_id, "message": "Left chat room"},
    )


def message_payload(message: Message) -> dict[str, Any]:
    """
    Flatten a persisted message for broadcasting.

    Must run where the ORM is usable (sync code or database_sync_to_async),
    since it reads the sender's name.
    """
    return {
        "id": message.id,
        "content": message.content,
        "chatId": message.conversation_id,
        "senderId": message.sender_party_id,
        "senderType": str(message.sender_kind),
        "senderName": message.sender_name,
        "createdAt": _timestamp(message.created_at),
        "isFromUser": message.is_from_user,
    }


def new_message(payload: dict[str, Any]) -> dict[str, Any]:
    return envelope(ServerEvent.NEW_MESSAGE, payload)


def system_message(
    chat_id: int,
    message: str,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    return envelope(
        ServerEvent.SYSTEM_MESSAGE,
        {
            "chatId": chat_id,
            "message": message,
            "timestamp": _timestamp(timestamp or timezone.now()),
        },
    )


def notification(user_id: int, notification: dict[str, Any]) -> dict[str, Any]:
    """
    Notification addressed to a user.

    Extra keys from ``notification`` are merged in. The addressed ``user_id``
    replaces any ``userId`` key inside the body.
    """
    return envelope(ServerEvent.NOTIFICATION, {**notification, "userId": user_id})


def error(message: str, code: str | None = None) -> dict[str, Any]:
    """Error frame; ``code`` is omitted when not given."""
    data: dict[str, Any] = {"message": message}
    if code is not None:
        data["code"] = code
    return envelope(ServerEvent.ERROR, data)
