"""
WebSocket consumer for real-time consulting chat.

One socket per client carries every conversation the client is looking at.
The client authenticates once during the handshake and then joins and
leaves conversation rooms with commands.

Consumers:
    ChatConsumer: Handles the ``ws/chat/`` endpoint

Authentication:
    TokenAuthMiddleware puts the handshake token in ``scope["auth_token"]``.
    connect() accepts the socket and resolves the token. Tokens without a
    ``user_type`` claim are resolved by probing users first, then stylists.
    On failure the client gets an ``error`` frame and the socket is closed
    with code 4001.

Channel Groups:
    - ``chat-<id>``: One per conversation, joined with ``joinChat``
    - ``chat-notifications``: Every authenticated connection

Frames (both directions): {"type": <event>, "data": {...}}

Commands (from client):
    - joinChat {chatId}: Start receiving a conversation's messages
    - leaveChat {chatId}: Stop receiving them
    - sendMessage {chatId, content}: Persist and broadcast a message

Events (to client):
    - connected, joinedChat, leftChat, newMessage, systemMessage,
      notification, error
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from authentication.identity import IdentityResolver, Party
from chat import responses
from chat.broadcast import ChatBroadcaster
from chat.constants import (
    SOCKET_CONFIG,
    ClientEvent,
    notification_group_name,
    room_group_name,
)
from chat.serializers import MessageCreateSerializer
from chat.services import ChatService
from core.exceptions import BaseApplicationError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionContext:
    """Who is on the other end of an authenticated socket."""

    party: Party


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for consulting chats.

    Attributes:
        context: Set once the handshake token resolved, None before
        joined_chat_ids: Rooms joined through this connection
    """

    FALLBACK_ERRORS = {
        ClientEvent.JOIN_CHAT: "Failed to join chat",
        ClientEvent.LEAVE_CHAT: "Failed to leave chat",
        ClientEvent.SEND_MESSAGE: "Failed to send message",
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.context: ConnectionContext | None = None
        self.joined_chat_ids: set[int] = set()
        self.in_notification_group = False

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    async def connect(self):
        """
        Accept the socket, then authenticate it.

        The socket is accepted first so a rejected client can be told why.
        """
        await self.accept(subprotocol=self.scope.get("auth_subprotocol"))

        try:
            party = await database_sync_to_async(IdentityResolver.resolve)(
                self.scope.get("auth_token"),
                allow_kind_probe=True,
            )
        except BaseApplicationError as e:
            logger.warning(f"Rejected WebSocket connection {self.channel_name}: {e}")
            await self.send_json(responses.error(e.message, e.error_code))
            await self.close(code=SOCKET_CONFIG.AUTH_FAILURE_CLOSE_CODE)
            return

        self.context = ConnectionContext(party=party)

        await self.channel_layer.group_add(
            notification_group_name(),
            self.channel_name,
        )
        self.in_notification_group = True

        await self.send_json(responses.connected(party.id, party.kind))
        logger.info(f"{party} connected ({self.channel_name})")

    async def disconnect(self, close_code):
        """
        Leave every group this connection joined.

        Best effort: a failing channel layer is logged, never raised.
        """
        for chat_id in sorted(self.joined_chat_ids):
            await self._discard(room_group_name(chat_id))
        self.joined_chat_ids.clear()

        if self.in_notification_group:
            await self._discard(notification_group_name())
            self.in_notification_group = False

        who = self.context.party if self.context else "unauthenticated client"
        logger.info(f"{who} disconnected (code {close_code})")

    async def _discard(self, group: str) -> None:
        try:
            await self.channel_layer.group_discard(group, self.channel_name)
        except Exception:
            logger.warning(
                f"Failed to leave group {group} for {self.channel_name}",
                exc_info=True,
            )

    # -------------------------------------------------------------------------
    # Incoming frames
    # -------------------------------------------------------------------------

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if text_data is None:
            await self.send_json(responses.error("Binary frames are not supported"))
            return

        try:
            content = await self.decode_json(text_data)
        except ValueError:
            await self.send_json(
                responses.error("Malformed JSON frame", ValidationError.default_error_code)
            )
            return

        await self.receive_json(content, **kwargs)

    async def receive_json(self, content, **kwargs):
        """
        Dispatch a command frame.

        Expected format:
            {"type": "joinChat", "data": {"chatId": 1}}
            {"type": "sendMessage", "data": {"chatId": 1, "content": "Hi"}}
        """
        if not isinstance(content, dict):
            await self.send_json(
                responses.error(
                    "Frame must be a JSON object", ValidationError.default_error_code
                )
            )
            return

        if self.context is None:
            await self.send_json(responses.error("Authentication required"))
            return

        event = content.get("type")
        handlers = {
            ClientEvent.JOIN_CHAT: self._handle_join_chat,
            ClientEvent.LEAVE_CHAT: self._handle_leave_chat,
            ClientEvent.SEND_MESSAGE: self._handle_send_message,
        }
        handler = handlers.get(event)
        if handler is None:
            await self.send_json(responses.error(f"Unknown event: {event}"))
            return

        data = content.get("data")
        if data is None:
            data = {}
        if not isinstance(data, dict):
            await self.send_json(
                responses.error(
                    "Frame data must be a JSON object",
                    ValidationError.default_error_code,
                )
            )
            return

        try:
            await handler(data)
        except BaseApplicationError as e:
            await self.send_json(responses.error(e.message, e.error_code))
        except Exception:
            logger.exception(f"{event} failed for {self.context.party}")
            await self.send_json(responses.error(self.FALLBACK_ERRORS[event]))

    # -------------------------------------------------------------------------
    # Command handlers
    # -------------------------------------------------------------------------

    async def _handle_join_chat(self, data: dict) -> None:
        party = self.context.party
        chat_id = self._parse_chat_id(data)

        result = await database_sync_to_async(ChatService.get_conversation_for_party)(
            party, chat_id
        )
        if not result.success:
            logger.info(f"{party} was refused chat {chat_id}: {result.error_code}")
            await self.send_json(responses.error(result.error, result.error_code))
            return

        await self.channel_layer.group_add(room_group_name(chat_id), self.channel_name)
        self.joined_chat_ids.add(chat_id)

        await self.send_json(responses.joined_chat(chat_id))
        logger.info(f"{party} joined chat {chat_id}")

    async def _handle_leave_chat(self, data: dict) -> None:
        chat_id = self._parse_chat_id(data)

        await self.channel_layer.group_discard(
            room_group_name(chat_id), self.channel_name
        )
        self.joined_chat_ids.discard(chat_id)

        await self.send_json(responses.left_chat(chat_id))
        logger.info(f"{self.context.party} left chat {chat_id}")

    async def _handle_send_message(self, data: dict) -> None:
        party = self.context.party
        chat_id = self._parse_chat_id(data)

        serializer = MessageCreateSerializer(data={"content": data.get("content")})
        if not serializer.is_valid():
            errors = {
                field: [str(error) for error in field_errors]
                for field, field_errors in serializer.errors.items()
            }
            first_field, first_errors = next(iter(errors.items()))
            raise ValidationError(f"{first_field}: {first_errors[0]}", details=errors)

        result = await self._send_message(
            party, chat_id, serializer.validated_data["content"]
        )
        if not result.success:
            await self.send_json(responses.error(result.error, result.error_code))
            return

        await ChatBroadcaster.broadcast_new_message(
            self.channel_layer, chat_id, result.data
        )
        logger.info(f"Message sent in chat {chat_id} by {party}")

    @database_sync_to_async
    def _send_message(self, party: Party, chat_id: int, content: str):
        """
        Persist the message and flatten it while the ORM is still usable.

        On success ``result.data`` is the broadcast payload, not the model.
        """
        result = ChatService.send_as_party(party, chat_id, content)
        if result.success:
            result.data = responses.message_payload(result.data)
        return result

    @staticmethod
    def _parse_chat_id(data: dict) -> int:
        value = data.get("chatId")
        if isinstance(value, str) and value.isdigit():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValidationError(
                "chatId must be a positive integer",
                details={"chatId": value},
            )
        return value

    # -------------------------------------------------------------------------
    # Channel layer events
    # -------------------------------------------------------------------------

    async def chat_new_message(self, event):
        await self.send_json(event["frame"])

    async def chat_system_message(self, event):
        await self.send_json(event["frame"])

    async def chat_notification(self, event):
        await self.send_json(event["frame"])
