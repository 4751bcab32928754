"""
Chat system service layer.

This module provides the business logic for consulting chats. REST views
and the WebSocket consumer both go through ChatService, so both transports
see the same data and the same failures.

Services:
    ConversationService: Conversation persistence (find, create, list, detail)
    MessageService: Atomic message append
    ChatService: Party-scoped access rules on top of the two stores

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Unexpected failures raise exceptions
    - Non-participants get NOT_FOUND, never a "forbidden" answer, so a
      conversation's existence does not leak

Usage:
    from chat.services import ChatService

    result = ChatService.create_or_get_conversation(user_id=1, stylist_id=1)
    if result.success:
        conversation, created = result.data

    result = ChatService.send_as_stylist(conversation.id, stylist_id=1, content="Hi!")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError

from authentication.models import PartyKind, Stylist, User
from chat.models import Conversation, Message
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from authentication.identity import Party


class ConversationService(BaseService):
    """
    Persistence of conversations.

    Methods:
        find_by_pair: Look up the conversation of a (user, stylist) pair
        create: Insert a conversation for an existing pair
        get_or_create: Idempotent find-or-create, safe under concurrency
        list_for: Conversations of one party with counterpart and preview
        get_detail: One conversation with all messages, participants only
    """

    @classmethod
    def find_by_pair(cls, user_id: int, stylist_id: int) -> Conversation | None:
        return Conversation.objects.find_by_pair(user_id, stylist_id)

    @classmethod
    def create(cls, user_id: int, stylist_id: int) -> ServiceResult[Conversation]:
        """
        Create a conversation between a user and a stylist.

        Does not look for an existing conversation first; a duplicate pair
        raises IntegrityError from the unique constraint.

        Error codes:
            DANGLING_REFERENCE: The user or the stylist does not exist
        """
        if not User.objects.filter(pk=user_id).exists():
            return ServiceResult.failure(
                f"User {user_id} does not exist",
                error_code="DANGLING_REFERENCE",
            )
        if not Stylist.objects.filter(pk=stylist_id).exists():
            return ServiceResult.failure(
                f"Stylist {stylist_id} does not exist",
                error_code="DANGLING_REFERENCE",
            )

        # Savepoint so a unique violation leaves the caller's transaction usable
        with cls.atomic():
            conversation = Conversation.objects.create(
                user_id=user_id,
                stylist_id=stylist_id,
            )

        cls.get_logger().info(
            f"Created conversation {conversation.id} "
            f"between user {user_id} and stylist {stylist_id}"
        )
        return ServiceResult.success(conversation)

    @classmethod
    def get_or_create(
        cls,
        user_id: int,
        stylist_id: int,
    ) -> ServiceResult[tuple[Conversation, bool]]:
        """
        Return the pair's conversation, creating it when missing.

        Implementation:
            1. Look up the existing conversation (fast path)
            2. Insert a new one
            3. If a concurrent request won the insert, the unique constraint
               rejects ours; re-read and return the winner's row

        Returns:
            ServiceResult with (conversation, created)

        Error codes:
            DANGLING_REFERENCE: The user or the stylist does not exist
        """
        existing = cls.find_by_pair(user_id, stylist_id)
        if existing is not None:
            return ServiceResult.success((existing, False))

        try:
            result = cls.create(user_id, stylist_id)
        except IntegrityError:
            winner = cls.find_by_pair(user_id, stylist_id)
            if winner is None:
                raise
            cls.get_logger().info(
                f"Lost create race for user {user_id} / stylist {stylist_id}, "
                f"using conversation {winner.id}"
            )
            return ServiceResult.success((winner, False))

        if not result.success:
            return result

        return ServiceResult.success((result.data, True))

    @classmethod
    def list_for(cls, kind: str, party_id: int) -> list[Conversation]:
        """
        All conversations of a party, newest activity first.

        Both participants are joined and the latest message is prefetched
        as ``conversation.latest_messages``.
        """
        return list(
            Conversation.objects.for_party(kind, party_id)
            .with_parties()
            .with_latest_message()
            .order_by("-updated_at", "-id")
        )

    @classmethod
    def get_detail(
        cls,
        conversation_id: int,
        kind: str,
        party_id: int,
    ) -> Conversation | None:
        """
        One conversation with every message, or None.

        Returns None both when the conversation does not exist and when the
        party does not participate in it.
        """
        return (
            Conversation.objects.for_party(kind, party_id)
            .with_parties()
            .with_messages()
            .filter(pk=conversation_id)
            .first()
        )


class MessageService(BaseService):
    """
    Message persistence.

    Methods:
        append_message: Insert a message and bump the conversation atomically
    """

    @classmethod
    def append_message(
        cls,
        conversation_id: int,
        sender_kind: str,
        sender_id: int,
        content: str,
    ) -> ServiceResult[Message]:
        """
        Append a message to a conversation the sender participates in.

        Implementation:
            1. Lock the conversation row, filtered by participancy
            2. Insert the message with the sender discriminator set
            3. Set conversation.updated_at to the message's created_at

        All three steps commit together or not at all. Concurrent appends
        to the same conversation serialize on the row lock, so updated_at
        always ends on the newest message.

        Error codes:
            NOT_PARTICIPANT: Conversation missing or sender not part of it
        """
        is_from_user = sender_kind == PartyKind.USER

        with cls.atomic():
            conversation = (
                Conversation.objects.for_party(sender_kind, sender_id)
                .select_related("user", "stylist")
                .select_for_update(of=("self",))
                .filter(pk=conversation_id)
                .first()
            )
            if conversation is None:
                return ServiceResult.failure(
                    "You are not a participant in this conversation",
                    error_code="NOT_PARTICIPANT",
                )

            message = Message.objects.create(
                conversation=conversation,
                content=content,
                is_from_user=is_from_user,
                sender=conversation.user if is_from_user else None,
                stylist_sender=None if is_from_user else conversation.stylist,
            )

            Conversation.objects.filter(pk=conversation.pk).update(
                updated_at=message.created_at
            )
            conversation.updated_at = message.created_at

        cls.get_logger().debug(
            f"{sender_kind} {sender_id} sent message {message.id} "
            f"to conversation {conversation.id}"
        )
        return ServiceResult.success(message)


class ChatService(BaseService):
    """
    Party-scoped chat operations used by REST views and the WebSocket consumer.

    Methods:
        list_user_conversations / list_stylist_conversations
        get_conversation_for_user / get_conversation_for_stylist
        get_conversation_for_party: Dispatch on party kind
        create_or_get_conversation: Idempotent, user initiated
        send_as_user / send_as_stylist
        send_as_party: Dispatch on party kind

    Error codes:
        NOT_FOUND: Conversation missing or caller not a participant
        PARTY_NOT_FOUND: User or stylist missing when opening a conversation
    """

    NOT_FOUND_MESSAGE = "Chat not found"

    @classmethod
    def _not_found(cls) -> ServiceResult:
        return ServiceResult.failure(cls.NOT_FOUND_MESSAGE, error_code="NOT_FOUND")

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    @classmethod
    def list_user_conversations(cls, user_id: int) -> list[Conversation]:
        return ConversationService.list_for(PartyKind.USER, user_id)

    @classmethod
    def list_stylist_conversations(cls, stylist_id: int) -> list[Conversation]:
        return ConversationService.list_for(PartyKind.STYLIST, stylist_id)

    # -------------------------------------------------------------------------
    # Detail
    # -------------------------------------------------------------------------

    @classmethod
    def _get_conversation(
        cls,
        conversation_id: int,
        kind: str,
        party_id: int,
    ) -> ServiceResult[Conversation]:
        conversation = ConversationService.get_detail(conversation_id, kind, party_id)
        if conversation is None:
            return cls._not_found()
        return ServiceResult.success(conversation)

    @classmethod
    def get_conversation_for_user(
        cls,
        conversation_id: int,
        user_id: int,
    ) -> ServiceResult[Conversation]:
        return cls._get_conversation(conversation_id, PartyKind.USER, user_id)

    @classmethod
    def get_conversation_for_stylist(
        cls,
        conversation_id: int,
        stylist_id: int,
    ) -> ServiceResult[Conversation]:
        return cls._get_conversation(conversation_id, PartyKind.STYLIST, stylist_id)

    @classmethod
    def get_conversation_for_party(
        cls,
        party: Party,
        conversation_id: int,
    ) -> ServiceResult[Conversation]:
        if party.is_user:
            return cls.get_conversation_for_user(conversation_id, party.id)
        return cls.get_conversation_for_stylist(conversation_id, party.id)

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @classmethod
    def create_or_get_conversation(
        cls,
        user_id: int,
        stylist_id: int,
    ) -> ServiceResult[tuple[Conversation, bool]]:
        """
        Open the user's conversation with a stylist, reusing an existing one.

        Returns:
            ServiceResult with (conversation, created)

        Error codes:
            PARTY_NOT_FOUND: The user or the stylist does not exist
        """
        if not User.objects.filter(pk=user_id).exists():
            return ServiceResult.failure("User not found", error_code="PARTY_NOT_FOUND")
        if not Stylist.objects.filter(pk=stylist_id).exists():
            return ServiceResult.failure(
                "Stylist not found", error_code="PARTY_NOT_FOUND"
            )

        result = ConversationService.get_or_create(user_id, stylist_id)
        if not result.success:
            # Party deleted between the check above and the insert
            return ServiceResult.failure(result.error, error_code="PARTY_NOT_FOUND")

        return result

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    @classmethod
    def _send(
        cls,
        conversation_id: int,
        kind: str,
        party_id: int,
        content: str,
    ) -> ServiceResult[Message]:
        result = MessageService.append_message(conversation_id, kind, party_id, content)
        if not result.success:
            return cls._not_found()
        return result

    @classmethod
    def send_as_user(
        cls,
        conversation_id: int,
        user_id: int,
        content: str,
    ) -> ServiceResult[Message]:
        return cls._send(conversation_id, PartyKind.USER, user_id, content)

    @classmethod
    def send_as_stylist(
        cls,
        conversation_id: int,
        stylist_id: int,
        content: str,
    ) -> ServiceResult[Message]:
        return cls._send(conversation_id, PartyKind.STYLIST, stylist_id, content)

    @classmethod
    def send_as_party(
        cls,
        party: Party,
        conversation_id: int,
        content: str,
    ) -> ServiceResult[Message]:
        if party.is_user:
            return cls.send_as_user(conversation_id, party.id, content)
        return cls.send_as_stylist(conversation_id, party.id, content)
