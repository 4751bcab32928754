"""
Celery tasks for chat app.

This module defines fire-and-forget tasks for pushing server events to
connected chat sockets from workers and other apps:
- System messages into a conversation room
- Notifications addressed to a user

Related files:
    - broadcast.py: ChatBroadcaster does the channel layer work

Usage:
    from chat.tasks import broadcast_system_message

    broadcast_system_message.delay(chat_id, "Your stylist is reviewing your photos")
"""

import logging

from celery import shared_task

from chat.broadcast import ChatBroadcaster

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(ConnectionError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def broadcast_system_message(self, chat_id: int, message: str) -> bool:
    """
    Send a system message to everyone in a conversation room.

    Args:
        chat_id: Conversation id
        message: Text shown to both parties

    Returns:
        True if the message was handed to the channel layer
    """
    return ChatBroadcaster.send_system_message(chat_id, message)


@shared_task(
    bind=True,
    autoretry_for=(ConnectionError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def broadcast_notification(self, user_id: int, notification: dict) -> bool:
    """
    Send a notification addressed to a user.

    Args:
        user_id: Recipient user id
        notification: JSON-serializable notification body

    Returns:
        True if the notification was handed to the channel layer
    """
    delivered = ChatBroadcaster.send_notification_to_user(user_id, notification)
    if not delivered:
        logger.warning(f"Notification for user {user_id} was not delivered")
    return delivered
