"""
ViewSets for chat API.

This module provides REST API endpoints for consulting chats, split by the
kind of party calling them:
- UserConversationViewSet: Endpoints for users (consulting clients)
- StylistConversationViewSet: Endpoints for stylists

URL Structure:
    /api/v1/chat/user/chats/                    GET, POST
    /api/v1/chat/user/chats/{id}/               GET
    /api/v1/chat/user/chats/{id}/messages/      POST
    /api/v1/chat/stylist/chats/                 GET
    /api/v1/chat/stylist/chats/{id}/            GET
    /api/v1/chat/stylist/chats/{id}/messages/   POST

Design Decisions:
    - All operations go through ChatService
    - A token of the wrong kind gets 403; a missing or invalid token gets 401
    - Conversations the caller does not take part in answer 404, exactly
      like conversations that do not exist
    - Opening a conversation is idempotent: 201 when created, 200 when an
      existing conversation is returned
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.models import PartyKind
from authentication.permissions import IsStylistParty, IsUserParty
from chat.serializers import (
    ConversationCreateSerializer,
    ConversationDetailSerializer,
    ConversationListSerializer,
    MessageCreateSerializer,
    MessageSerializer,
)
from chat.services import ChatService

ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PARTY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def error_response(result) -> Response:
    return Response(
        {"error": result.error, "error_code": result.error_code},
        status=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


class _PartyConversationViewSet(viewsets.GenericViewSet):
    """
    Shared list/retrieve/messages behaviour for one party kind.

    Subclasses set ``party_kind`` and the matching permission class.
    """

    party_kind: str = ""
    lookup_value_regex = "[0-9]+"

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["viewer_kind"] = self.party_kind
        return context

    def get_serializer_class(self):
        if self.action == "list":
            return ConversationListSerializer
        if self.action == "create":
            return ConversationCreateSerializer
        if self.action == "messages":
            return MessageCreateSerializer
        return ConversationDetailSerializer

    def _list(self):
        if self.party_kind == PartyKind.USER:
            return ChatService.list_user_conversations(self.request.user.id)
        return ChatService.list_stylist_conversations(self.request.user.id)

    def _get(self, conversation_id: int):
        if self.party_kind == PartyKind.USER:
            return ChatService.get_conversation_for_user(
                conversation_id, self.request.user.id
            )
        return ChatService.get_conversation_for_stylist(
            conversation_id, self.request.user.id
        )

    def _send(self, conversation_id: int, content: str):
        if self.party_kind == PartyKind.USER:
            return ChatService.send_as_user(
                conversation_id, self.request.user.id, content
            )
        return ChatService.send_as_stylist(
            conversation_id, self.request.user.id, content
        )

    def list(self, request):
        """List the caller's conversations, newest activity first."""
        conversations = self._list()
        serializer = ConversationListSerializer(
            conversations, many=True, context=self.get_serializer_context()
        )
        return Response(serializer.data)

    def retrieve(self, request, pk=None):
        """Get a conversation with all of its messages."""
        result = self._get(int(pk))
        if not result.success:
            return error_response(result)

        serializer = ConversationDetailSerializer(
            result.data, context=self.get_serializer_context()
        )
        return Response(serializer.data)

    @action(detail=True, methods=["post"])
    def messages(self, request, pk=None):
        """Send a message to a conversation."""
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self._send(int(pk), serializer.validated_data["content"])
        if not result.success:
            return error_response(result)

        return Response(
            MessageSerializer(result.data).data, status=status.HTTP_201_CREATED
        )


@extend_schema_view(
    list=extend_schema(
        operation_id="list_user_chats",
        summary="List user's chats",
        responses={200: ConversationListSerializer(many=True)},
        tags=["Chat - User"],
    ),
    retrieve=extend_schema(
        operation_id="get_user_chat",
        summary="Get chat with messages",
        responses={
            200: ConversationDetailSerializer,
            404: OpenApiResponse(description="Chat not found"),
        },
        tags=["Chat - User"],
    ),
    create=extend_schema(
        operation_id="create_user_chat",
        summary="Open chat with a stylist",
        request=ConversationCreateSerializer,
        responses={
            200: ConversationDetailSerializer,
            201: ConversationDetailSerializer,
            404: OpenApiResponse(description="Stylist not found"),
        },
        tags=["Chat - User"],
    ),
    messages=extend_schema(
        operation_id="send_user_message",
        summary="Send message as user",
        request=MessageCreateSerializer,
        responses={
            201: MessageSerializer,
            404: OpenApiResponse(description="Chat not found"),
        },
        tags=["Chat - User"],
    ),
)
class UserConversationViewSet(_PartyConversationViewSet):
    """
    Chat endpoints for users (consulting clients).

    list:
        All of the user's chats with the stylist's profile and the latest
        message.

    retrieve:
        One chat with every message, oldest first.

    create:
        Open a chat with a stylist, or return the existing one.

    messages:
        Send a message as the user.
    """

    party_kind = PartyKind.USER
    permission_classes = [IsAuthenticated, IsUserParty]

    def create(self, request):
        """Open a chat with a stylist (idempotent)."""
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChatService.create_or_get_conversation(
            user_id=request.user.id,
            stylist_id=serializer.validated_data["stylist_id"],
        )
        if not result.success:
            return error_response(result)

        conversation, created = result.data
        detail = ChatService.get_conversation_for_user(conversation.id, request.user.id)
        output_serializer = ConversationDetailSerializer(
            detail.data, context=self.get_serializer_context()
        )
        return Response(
            output_serializer.data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


@extend_schema_view(
    list=extend_schema(
        operation_id="list_stylist_chats",
        summary="List stylist's chats",
        responses={200: ConversationListSerializer(many=True)},
        tags=["Chat - Stylist"],
    ),
    retrieve=extend_schema(
        operation_id="get_stylist_chat",
        summary="Get chat with messages",
        responses={
            200: ConversationDetailSerializer,
            404: OpenApiResponse(description="Chat not found"),
        },
        tags=["Chat - Stylist"],
    ),
    messages=extend_schema(
        operation_id="send_stylist_message",
        summary="Send message as stylist",
        request=MessageCreateSerializer,
        responses={
            201: MessageSerializer,
            404: OpenApiResponse(description="Chat not found"),
        },
        tags=["Chat - Stylist"],
    ),
)
class StylistConversationViewSet(_PartyConversationViewSet):
    """
    Chat endpoints for stylists.

    Stylists cannot open chats; users start them.
    """

    party_kind = PartyKind.STYLIST
    permission_classes = [IsAuthenticated, IsStylistParty]
