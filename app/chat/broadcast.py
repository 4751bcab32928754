"""
Server-initiated pushes to chat sockets.

Two primitives exist:
    - Room broadcast: reaches every socket that joined ``chat-<id>``
    - Global broadcast: reaches every authenticated socket

Notifications are addressed to one user but use the global broadcast, so
every connected client receives them and must filter on ``userId``.
Sockets are not indexed by party, so there is no narrower target.

Usage:
    from chat.broadcast import ChatBroadcaster

    # From sync code (views, services, Celery tasks)
    ChatBroadcaster.send_system_message(chat_id, "The stylist has left")
    ChatBroadcaster.send_notification_to_user(user_id, {"title": "New look"})
"""

from __future__ import annotations

import logging
from typing import Any

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from chat import responses
from chat.constants import notification_group_name, room_group_name

logger = logging.getLogger(__name__)


class ChatBroadcaster:
    """
    Channel layer fan-out for chat events.

    Group messages carry a fully built client frame under ``frame``;
    ChatConsumer forwards it unchanged.
    """

    @staticmethod
    async def broadcast_new_message(
        channel_layer,
        chat_id: int,
        payload: dict[str, Any],
    ) -> None:
        """Push a ``newMessage`` frame to everyone in the room."""
        await channel_layer.group_send(
            room_group_name(chat_id),
            {"type": "chat.new_message", "frame": responses.new_message(payload)},
        )
        logger.debug(f"New message {payload.get('id')} broadcast to chat {chat_id}")

    @classmethod
    def send_system_message(cls, chat_id: int, message: str) -> bool:
        """
        Push a ``systemMessage`` frame to everyone in the room.

        Returns:
            False when no channel layer is configured
        """
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning(f"No channel layer, system message to chat {chat_id} dropped")
            return False

        async_to_sync(channel_layer.group_send)(
            room_group_name(chat_id),
            {
                "type": "chat.system_message",
                "frame": responses.system_message(chat_id, message),
            },
        )
        logger.info(f"System message sent to chat {chat_id}: {message}")
        return True

    @classmethod
    def send_notification_to_user(
        cls,
        user_id: int,
        notification: dict[str, Any],
    ) -> bool:
        """
        Push a ``notification`` frame addressed to ``user_id``.

        Delivered to every authenticated connection (see module docstring).

        Returns:
            False when no channel layer is configured
        """
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning(f"No channel layer, notification for user {user_id} dropped")
            return False

        async_to_sync(channel_layer.group_send)(
            notification_group_name(),
            {
                "type": "chat.notification",
                "frame": responses.notification(user_id, notification),
            },
        )
        logger.info(f"Notification sent to user {user_id}")
        return True
