"""
Serializers for chat API.

This module provides serializers for the chat system:
- Party summaries (user and stylist public profiles)
- Message serializers (read, create)
- Conversation serializers (list, detail, create)

Serializer Hierarchy:
    UserSummarySerializer: id and name of a user
    StylistSummarySerializer: Public stylist profile

    MessageSerializer: Message with sender kind, id and name
    MessageCreateSerializer: Send new message (REST and WebSocket)

    ConversationListSerializer: Counterpart profile and latest message
    ConversationDetailSerializer: Counterpart profile and all messages
    ConversationCreateSerializer: Open a conversation with a stylist

Design Decisions:
    - Read and write serializers are separate for clarity
    - List and detail views show only the other party's profile. The
      viewer kind comes from ``context["viewer_kind"]`` or from the
      authenticated request party.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from authentication.models import PartyKind, Stylist, User
from chat.constants import MESSAGE_CONFIG
from chat.models import Conversation, Message


# =============================================================================
# Party Summaries
# =============================================================================


class UserSummarySerializer(serializers.ModelSerializer):
    """Minimal user profile shown to stylists."""

    class Meta:
        model = User
        fields = ["id", "name"]
        read_only_fields = fields


class StylistSummarySerializer(serializers.ModelSerializer):
    """Public stylist profile shown to users."""

    class Meta:
        model = Stylist
        fields = ["id", "name", "profile_image_url", "rating", "is_verified"]
        read_only_fields = fields


# =============================================================================
# Message Serializers
# =============================================================================


class MessageSerializer(serializers.ModelSerializer):
    """
    Message with its author.

    ``sender_type`` and ``sender_id`` together identify the author; ids are
    only unique within one party kind.
    """

    chat_id = serializers.IntegerField(source="conversation_id", read_only=True)
    sender_type = serializers.CharField(
        source="sender_kind",
        read_only=True,
        help_text="'user' or 'stylist'",
    )
    sender_id = serializers.IntegerField(
        source="sender_party_id",
        read_only=True,
        help_text="Id of the author within its party kind",
    )
    sender_name = serializers.CharField(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "chat_id",
            "content",
            "is_from_user",
            "sender_type",
            "sender_id",
            "sender_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending messages.

    Shared by the REST endpoint and the WebSocket ``sendMessage`` command so
    both transports accept exactly the same content.
    """

    content = serializers.CharField(
        min_length=MESSAGE_CONFIG.MIN_CONTENT_LENGTH,
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="Message content (max 1,000 characters)",
    )


# =============================================================================
# Conversation Serializers
# =============================================================================


class ConversationListSerializer(serializers.ModelSerializer):
    """
    Serializer for conversation list view.

    Includes:
    - user / stylist: The counterpart's profile (the viewer's own is omitted)
    - last_message: Most recent message, or null for an empty conversation
    """

    user = UserSummarySerializer(read_only=True)
    stylist = StylistSummarySerializer(read_only=True)
    last_message = serializers.SerializerMethodField(
        help_text="Most recent message preview"
    )

    class Meta:
        model = Conversation
        fields = [
            "id",
            "user_id",
            "stylist_id",
            "user",
            "stylist",
            "last_message",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    @extend_schema_field(MessageSerializer(allow_null=True))
    def get_last_message(self, obj: Conversation) -> dict | None:
        last_message = obj.latest_message
        if last_message is None:
            return None
        return MessageSerializer(last_message).data

    def _viewer_kind(self) -> str | None:
        if "viewer_kind" in self.context:
            return self.context["viewer_kind"]
        request = self.context.get("request")
        return getattr(getattr(request, "user", None), "kind", None)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        viewer_kind = self._viewer_kind()
        if viewer_kind == PartyKind.USER:
            data.pop("user", None)
        elif viewer_kind == PartyKind.STYLIST:
            data.pop("stylist", None)
        return data


class ConversationDetailSerializer(ConversationListSerializer):
    """
    Serializer for conversation detail view.

    Replaces the preview with the full message history, oldest first.
    """

    messages = serializers.SerializerMethodField(
        help_text="All messages, oldest first"
    )

    class Meta(ConversationListSerializer.Meta):
        fields = [
            "id",
            "user_id",
            "stylist_id",
            "user",
            "stylist",
            "messages",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    @extend_schema_field(MessageSerializer(many=True))
    def get_messages(self, obj: Conversation) -> list[dict]:
        messages = getattr(obj, "ordered_messages", None)
        if messages is None:
            messages = obj.messages.select_related(
                "sender", "stylist_sender"
            ).order_by("created_at", "id")
        return MessageSerializer(messages, many=True).data


class ConversationCreateSerializer(serializers.Serializer):
    """
    Serializer for opening a conversation.

    The user comes from the authenticated request; only the stylist is sent.
    """

    stylist_id = serializers.IntegerField(
        min_value=1,
        help_text="Stylist to chat with",
    )
