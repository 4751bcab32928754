"""
Chat system models.

This module defines the data models for 1:1 consulting chats between a
user and a stylist:

Models:
    Conversation: The single thread between one user and one stylist
    Message: Immutable utterance inside a conversation

Design Decisions:
    - One conversation per (user, stylist) pair, enforced by a unique
      constraint. Find-or-create relies on it under concurrency.
    - Messages record who wrote them with an ``is_from_user`` flag plus two
      nullable sender columns (one per store). A check constraint keeps
      exactly one of them set and consistent with the flag.
    - Conversations are never deleted through the API. Party foreign keys
      use PROTECT so deleting an account with chat history fails loudly.
    - ``Conversation.updated_at`` is pinned to the newest message's
      ``created_at`` and drives list ordering.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from authentication.models import PartyKind
from chat.constants import MESSAGE_CONFIG
from chat.managers import ConversationManager
from core.models import BaseModel


class Conversation(BaseModel):
    """
    Chat thread between exactly one user and one stylist.

    Fields:
        user: Consulting client
        stylist: Fashion consultant
        created_at: When the thread was opened
        updated_at: created_at of the newest message (or creation time)

    Constraints:
        - UniqueConstraint(user, stylist): One conversation per pair
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="conversations",
        help_text="Consulting client in this conversation",
    )
    stylist = models.ForeignKey(
        "authentication.Stylist",
        on_delete=models.PROTECT,
        related_name="conversations",
        help_text="Stylist in this conversation",
    )

    objects = ConversationManager()

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-updated_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "stylist"],
                name="unique_conversation_per_pair",
            ),
        ]
        indexes = [
            # Stylist inbox, newest activity first
            models.Index(
                fields=["stylist", "-updated_at"],
                name="chat_conv_stylist_recent_idx",
            ),
            # User inbox, newest activity first
            models.Index(
                fields=["user", "-updated_at"],
                name="chat_conv_user_recent_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Conversation {self.pk} (user {self.user_id} / stylist {self.stylist_id})"

    def has_participant(self, kind: str, party_id: int) -> bool:
        if kind == PartyKind.USER:
            return self.user_id == party_id
        if kind == PartyKind.STYLIST:
            return self.stylist_id == party_id
        return False

    @property
    def latest_message(self) -> Message | None:
        """
        Newest message, using the prefetched ``latest_messages`` when present.
        """
        prefetched = getattr(self, "latest_messages", None)
        if prefetched is not None:
            return prefetched[0] if prefetched else None
        return self.messages.order_by("-created_at", "-id").first()


class Message(BaseModel):
    """
    Single message in a conversation.

    Fields:
        conversation: Owning conversation (messages are deleted with it)
        content: Text, 1 to 1000 characters
        is_from_user: True when written by the conversation's user
        sender: Authoring user, set iff is_from_user
        stylist_sender: Authoring stylist, set iff not is_from_user

    Constraints:
        - CheckConstraint: sender columns match is_from_user
        - CheckConstraint: content is not empty
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )
    content = models.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="Message text",
    )
    is_from_user = models.BooleanField(
        help_text="Whether the user (rather than the stylist) wrote this message",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sent_chat_messages",
        help_text="Authoring user (null for stylist messages)",
    )
    stylist_sender = models.ForeignKey(
        "authentication.Stylist",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sent_chat_messages",
        help_text="Authoring stylist (null for user messages)",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(
                        is_from_user=True,
                        sender__isnull=False,
                        stylist_sender__isnull=True,
                    )
                    | Q(
                        is_from_user=False,
                        sender__isnull=True,
                        stylist_sender__isnull=False,
                    )
                ),
                name="chat_message_sender_matches_kind",
            ),
            models.CheckConstraint(
                condition=~Q(content=""),
                name="chat_message_content_not_empty",
            ),
        ]
        indexes = [
            # Messages in a conversation, oldest first
            models.Index(
                fields=["conversation", "created_at", "id"],
                name="chat_msg_conv_created_idx",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        content_preview = (
            self.content[:50] + "..." if len(self.content) > 50 else self.content
        )
        return f"{self.sender_kind} {self.sender_party_id}: {content_preview}"

    @property
    def sender_kind(self) -> str:
        return PartyKind.USER if self.is_from_user else PartyKind.STYLIST

    @property
    def sender_party_id(self) -> int | None:
        return self.sender_id if self.is_from_user else self.stylist_sender_id

    @property
    def sender_account(self):
        """The User or Stylist row that wrote this message."""
        return self.sender if self.is_from_user else self.stylist_sender

    @property
    def sender_name(self) -> str:
        account = self.sender_account
        return account.display_name if account is not None else ""
