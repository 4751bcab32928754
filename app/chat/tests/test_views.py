"""
Tests for chat API views.

This module tests the REST endpoints for both party kinds:
- UserConversationViewSet: list, open, retrieve, send
- StylistConversationViewSet: list, retrieve, send

Test Organization:
    - Each endpoint has its own test class
    - Tests follow pattern: test_<scenario>_<expected_outcome>

Testing Philosophy:
    Tests focus on observable HTTP behavior:
    - Response status codes
    - Response body structure
    - Database state changes
    - Authentication/permission enforcement
"""

from rest_framework import status

from chat.models import Conversation, Message
from chat.tests.factories import (
    ConversationFactory,
    StylistMessageFactory,
    UserMessageFactory,
)


# =============================================================================
# URL Constants
# =============================================================================


USER_CHATS_URL = "/api/v1/chat/user/chats/"
STYLIST_CHATS_URL = "/api/v1/chat/stylist/chats/"


def user_chat_url(chat_id):
    return f"{USER_CHATS_URL}{chat_id}/"


def stylist_chat_url(chat_id):
    return f"{STYLIST_CHATS_URL}{chat_id}/"


def user_messages_url(chat_id):
    return f"{USER_CHATS_URL}{chat_id}/messages/"


def stylist_messages_url(chat_id):
    return f"{STYLIST_CHATS_URL}{chat_id}/messages/"


# =============================================================================
# Authentication and Kind Enforcement
# =============================================================================


class TestAuthentication:
    """Credential and party-kind checks shared by every endpoint."""

    def test_missing_token_is_401(self, api_client, db):
        response = api_client.get(USER_CHATS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response["WWW-Authenticate"].startswith("Bearer")

    def test_garbage_token_is_401(self, api_client, db):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")

        response = api_client.get(STYLIST_CHATS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_stylist_token_on_user_endpoint_is_403(self, stylist_client):
        """
        A valid token of the wrong kind is forbidden, not unauthenticated.

        Why it matters: clients distinguish "log in again" from "wrong app".
        """
        response = stylist_client.get(USER_CHATS_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_user_token_on_stylist_endpoint_is_403(self, user_client):
        response = user_client.get(STYLIST_CHATS_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# List
# =============================================================================


class TestListChats:
    """Tests for GET user/chats/ and stylist/chats/."""

    def test_user_sees_stylist_profile_and_last_message(self, user_client, conversation, stylist):
        UserMessageFactory(conversation=conversation, content="Hi")
        StylistMessageFactory(conversation=conversation, content="Welcome!")

        response = user_client.get(USER_CHATS_URL)

        assert response.status_code == status.HTTP_200_OK
        (chat,) = response.data
        assert chat["id"] == conversation.id
        assert chat["stylist"]["name"] == "Lee Fashion"
        assert chat["stylist"]["id"] == stylist.id
        assert "user" not in chat
        assert chat["last_message"]["content"] == "Welcome!"
        assert chat["last_message"]["sender_type"] == "stylist"

    def test_stylist_sees_user_profile(self, stylist_client, conversation):
        response = stylist_client.get(STYLIST_CHATS_URL)

        (chat,) = response.data
        assert chat["user"] == {"id": conversation.user_id, "name": "Kim Minji"}
        assert "stylist" not in chat
        assert chat["last_message"] is None

    def test_only_own_chats_listed(self, other_user_client, conversation):
        response = other_user_client.get(USER_CHATS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []


# =============================================================================
# Open (user only)
# =============================================================================


class TestOpenChat:
    """Tests for POST user/chats/."""

    def test_creates_chat_201(self, user_client, user, stylist):
        response = user_client.post(USER_CHATS_URL, {"stylist_id": stylist.id}, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["stylist_id"] == stylist.id
        assert response.data["messages"] == []
        assert Conversation.objects.filter(user=user, stylist=stylist).count() == 1

    def test_existing_chat_200(self, user_client, conversation, stylist):
        """
        Opening an existing chat returns it with its history.

        Why it matters: the client uses one call for "start or resume".
        """
        UserMessageFactory(conversation=conversation, content="Earlier")

        response = user_client.post(USER_CHATS_URL, {"stylist_id": stylist.id}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == conversation.id
        assert [m["content"] for m in response.data["messages"]] == ["Earlier"]
        assert Conversation.objects.count() == 1

    def test_unknown_stylist_404(self, user_client):
        response = user_client.post(USER_CHATS_URL, {"stylist_id": 999999}, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {
            "error": "Stylist not found",
            "error_code": "PARTY_NOT_FOUND",
        }

    def test_invalid_stylist_id_400(self, user_client):
        response = user_client.post(USER_CHATS_URL, {"stylist_id": "abc"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "stylist_id" in response.data

    def test_stylists_cannot_open_chats(self, stylist_client, stylist):
        response = stylist_client.post(
            STYLIST_CHATS_URL, {"stylist_id": stylist.id}, format="json"
        )

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


# =============================================================================
# Retrieve
# =============================================================================


class TestRetrieveChat:
    """Tests for GET user/chats/{id}/ and stylist/chats/{id}/."""

    def test_participant_gets_messages_in_order(self, stylist_client, conversation):
        UserMessageFactory(conversation=conversation, content="First")
        StylistMessageFactory(conversation=conversation, content="Second")

        response = stylist_client.get(stylist_chat_url(conversation.id))

        assert response.status_code == status.HTTP_200_OK
        messages = response.data["messages"]
        assert [m["content"] for m in messages] == ["First", "Second"]
        assert messages[0]["sender_type"] == "user"
        assert messages[0]["sender_name"] == "Kim Minji"
        assert messages[1]["is_from_user"] is False

    def test_non_participant_404_matches_missing(self, other_stylist_client, conversation):
        """
        An outsider sees exactly what a missing id returns.

        Why it matters: probing ids must not reveal which chats exist.
        """
        forbidden = other_stylist_client.get(stylist_chat_url(conversation.id))
        missing = other_stylist_client.get(stylist_chat_url(999999))

        assert forbidden.status_code == status.HTTP_404_NOT_FOUND
        assert forbidden.data == missing.data
        assert forbidden.data == {"error": "Chat not found", "error_code": "NOT_FOUND"}

    def test_non_numeric_id_is_not_routed(self, user_client, db):
        response = user_client.get(user_chat_url("abc"))

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Send
# =============================================================================


class TestSendMessage:
    """Tests for POST .../chats/{id}/messages/."""

    def test_user_sends_201(self, user_client, conversation, user):
        response = user_client.post(
            user_messages_url(conversation.id), {"content": "Is linen ok?"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["content"] == "Is linen ok?"
        assert response.data["chat_id"] == conversation.id
        assert response.data["is_from_user"] is True
        assert response.data["sender_type"] == "user"
        assert response.data["sender_id"] == user.id

    def test_stylist_sends_201(self, stylist_client, conversation, stylist):
        response = stylist_client.post(
            stylist_messages_url(conversation.id), {"content": "Yes!"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        message = Message.objects.get(pk=response.data["id"])
        assert message.stylist_sender_id == stylist.id
        assert message.is_from_user is False

    def test_send_bumps_chat_updated_at(self, user_client, conversation):
        response = user_client.post(
            user_messages_url(conversation.id), {"content": "Hi"}, format="json"
        )

        conversation.refresh_from_db()
        message = Message.objects.get(pk=response.data["id"])
        assert conversation.updated_at == message.created_at

    def test_empty_content_400(self, user_client, conversation):
        response = user_client.post(
            user_messages_url(conversation.id), {"content": ""}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "content" in response.data
        assert not Message.objects.exists()

    def test_too_long_content_400(self, user_client, conversation):
        response = user_client.post(
            user_messages_url(conversation.id), {"content": "x" * 1001}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_max_length_content_accepted(self, user_client, conversation):
        response = user_client.post(
            user_messages_url(conversation.id), {"content": "x" * 1000}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_outsider_send_404(self, other_user_client, conversation):
        response = other_user_client.post(
            user_messages_url(conversation.id), {"content": "Hi"}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "NOT_FOUND"
        assert not Message.objects.exists()

    def test_lists_reflect_new_message(self, user_client, conversation, user):
        other = ConversationFactory(user=user)
        user_client.post(user_messages_url(conversation.id), {"content": "Hi"}, format="json")

        response = user_client.get(USER_CHATS_URL)

        assert [c["id"] for c in response.data] == [conversation.id, other.id]
