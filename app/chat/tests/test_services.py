"""
Tests for chat services.

This module tests:
- ConversationService: find-or-create, listing order, detail loading
- MessageService: atomic append and the conversation timestamp
- ChatService: party-scoped access and error mapping

Testing Philosophy:
    Non-participants must be indistinguishable from callers asking for a
    conversation that does not exist. Several tests compare the two
    failures field by field.
"""

from unittest.mock import patch

import pytest
from django.db import DatabaseError, IntegrityError
from freezegun import freeze_time

from authentication.identity import Party
from authentication.models import PartyKind
from authentication.tests.factories import StylistFactory, UserFactory
from chat.models import Conversation, Message
from chat.services import ChatService, ConversationService, MessageService
from chat.tests.factories import (
    ConversationFactory,
    StylistMessageFactory,
    UserMessageFactory,
)


# =============================================================================
# ConversationService
# =============================================================================


class TestConversationServiceGetOrCreate:
    """Tests for ConversationService.get_or_create and create."""

    def test_creates_when_missing(self, user, stylist):
        result = ConversationService.get_or_create(user.id, stylist.id)

        assert result.success
        conversation, created = result.data
        assert created is True
        assert conversation.user_id == user.id
        assert conversation.stylist_id == stylist.id

    def test_is_idempotent(self, user, stylist):
        """
        Opening the same pair twice returns the first conversation.

        Why it matters: a user tapping "chat" twice must not end up with two
        threads with the same stylist.
        """
        first, _ = ConversationService.get_or_create(user.id, stylist.id).data
        second, created = ConversationService.get_or_create(user.id, stylist.id).data

        assert created is False
        assert second.id == first.id
        assert Conversation.objects.count() == 1

    def test_lost_race_returns_winner(self, conversation, user, stylist):
        """
        A concurrent insert of the same pair resolves to the existing row.

        The first lookup is forced to miss, as if another request inserted
        the row right after it. The unique constraint then rejects our
        insert and the service re-reads the winner.
        """
        with patch.object(
            ConversationService,
            "find_by_pair",
            side_effect=[None, conversation],
        ) as find_by_pair:
            result = ConversationService.get_or_create(user.id, stylist.id)

        assert result.success
        assert result.data == (conversation, False)
        assert find_by_pair.call_count == 2
        assert Conversation.objects.count() == 1

    def test_integrity_error_without_winner_propagates(self, conversation, user, stylist):
        with patch.object(ConversationService, "find_by_pair", return_value=None):
            with pytest.raises(IntegrityError):
                ConversationService.get_or_create(user.id, stylist.id)

    def test_missing_user_is_dangling_reference(self, stylist):
        result = ConversationService.create(999999, stylist.id)

        assert not result.success
        assert result.error_code == "DANGLING_REFERENCE"
        assert Conversation.objects.count() == 0

    def test_missing_stylist_is_dangling_reference(self, user):
        result = ConversationService.get_or_create(user.id, 999999)

        assert not result.success
        assert result.error_code == "DANGLING_REFERENCE"


class TestConversationServiceListing:
    """Tests for ConversationService.list_for and get_detail."""

    def test_lists_only_own_conversations(self, conversation, other_user, stylist):
        foreign = ConversationFactory(user=other_user, stylist=stylist)

        user_ids = [c.id for c in ConversationService.list_for(PartyKind.USER, conversation.user_id)]
        stylist_ids = [c.id for c in ConversationService.list_for(PartyKind.STYLIST, stylist.id)]

        assert user_ids == [conversation.id]
        assert set(stylist_ids) == {conversation.id, foreign.id}

    def test_orders_by_latest_activity(self, user, stylist, other_stylist):
        """
        The conversation with the newest message comes first.

        Why it matters: inboxes surface the thread that just moved.
        """
        with freeze_time("2024-03-01 10:00:00"):
            older = ConversationFactory(user=user, stylist=stylist)
        with freeze_time("2024-03-01 11:00:00"):
            newer = ConversationFactory(user=user, stylist=other_stylist)
        with freeze_time("2024-03-01 12:00:00"):
            MessageService.append_message(older.id, PartyKind.USER, user.id, "Back again")

        conversations = ConversationService.list_for(PartyKind.USER, user.id)

        assert [c.id for c in conversations] == [older.id, newer.id]

    def test_prefetches_latest_message(self, conversation):
        UserMessageFactory(conversation=conversation)
        newest = StylistMessageFactory(conversation=conversation)

        (listed,) = ConversationService.list_for(PartyKind.USER, conversation.user_id)

        assert listed.latest_messages == [newest]

    def test_detail_orders_messages_oldest_first(self, conversation):
        first = UserMessageFactory(conversation=conversation)
        second = StylistMessageFactory(conversation=conversation)

        detail = ConversationService.get_detail(
            conversation.id, PartyKind.STYLIST, conversation.stylist_id
        )

        assert detail.ordered_messages == [first, second]

    def test_detail_hidden_from_non_participant(self, conversation, other_stylist):
        assert (
            ConversationService.get_detail(
                conversation.id, PartyKind.STYLIST, other_stylist.id
            )
            is None
        )

    def test_unknown_kind_is_rejected(self, conversation):
        with pytest.raises(ValueError):
            ConversationService.list_for("admin", conversation.user_id)


# =============================================================================
# MessageService
# =============================================================================


class TestMessageServiceAppend:
    """Tests for MessageService.append_message."""

    def test_user_message_sets_user_sender(self, conversation, user):
        result = MessageService.append_message(
            conversation.id, PartyKind.USER, user.id, "Which jacket?"
        )

        message = result.data
        assert result.success
        assert message.is_from_user is True
        assert message.sender_id == user.id
        assert message.stylist_sender_id is None

    def test_stylist_message_sets_stylist_sender(self, conversation, stylist):
        message = MessageService.append_message(
            conversation.id, PartyKind.STYLIST, stylist.id, "The navy one"
        ).data

        assert message.is_from_user is False
        assert message.sender_id is None
        assert message.stylist_sender_id == stylist.id

    def test_conversation_updated_at_tracks_latest_message(self, conversation, user, stylist):
        """
        updated_at equals the newest message's created_at after each append.

        Why it matters: list ordering and "last active" labels read it.
        """
        with freeze_time("2024-05-01 09:00:00"):
            first = MessageService.append_message(
                conversation.id, PartyKind.USER, user.id, "Hi"
            ).data
        conversation.refresh_from_db()
        assert conversation.updated_at == first.created_at

        with freeze_time("2024-05-01 09:05:00"):
            second = MessageService.append_message(
                conversation.id, PartyKind.STYLIST, stylist.id, "Hello!"
            ).data
        conversation.refresh_from_db()
        assert conversation.updated_at == second.created_at
        assert second.created_at > first.created_at

    def test_non_participant_is_rejected(self, conversation, other_user):
        result = MessageService.append_message(
            conversation.id, PartyKind.USER, other_user.id, "Let me in"
        )

        assert not result.success
        assert result.error_code == "NOT_PARTICIPANT"
        assert Message.objects.count() == 0

    def test_failed_append_leaves_conversation_untouched(self, conversation, other_stylist):
        before = conversation.updated_at

        MessageService.append_message(
            conversation.id, PartyKind.STYLIST, other_stylist.id, "Hi"
        )

        conversation.refresh_from_db()
        assert conversation.updated_at == before

    def test_touch_failure_rolls_back_message(self, conversation, user):
        """
        A failing timestamp update undoes the message insert.

        Why it matters: a stored message must always be reflected in the
        conversation's updated_at, so both writes commit together or not at all.
        """
        before = conversation.updated_at

        with patch(
            "django.db.models.query.QuerySet.update",
            side_effect=DatabaseError("touch failed"),
        ):
            with pytest.raises(DatabaseError):
                MessageService.append_message(
                    conversation.id, PartyKind.USER, user.id, "Lost?"
                )

        conversation.refresh_from_db()
        assert Message.objects.count() == 0
        assert conversation.updated_at == before


# =============================================================================
# ChatService
# =============================================================================


class TestChatServiceCreateOrGet:
    """Tests for ChatService.create_or_get_conversation."""

    def test_returns_created_flag(self, user, stylist):
        first = ChatService.create_or_get_conversation(user.id, stylist.id)
        second = ChatService.create_or_get_conversation(user.id, stylist.id)

        assert first.data[1] is True
        assert second.data[1] is False
        assert first.data[0].id == second.data[0].id

    def test_missing_stylist(self, user):
        result = ChatService.create_or_get_conversation(user.id, 999999)

        assert not result.success
        assert result.error == "Stylist not found"
        assert result.error_code == "PARTY_NOT_FOUND"

    def test_missing_user(self, stylist):
        result = ChatService.create_or_get_conversation(999999, stylist.id)

        assert result.error == "User not found"
        assert result.error_code == "PARTY_NOT_FOUND"

    def test_dangling_reference_maps_to_party_not_found(self, user, stylist, mocker):
        """A party deleted between the check and the insert is still a 404."""
        mocker.patch.object(
            ConversationService,
            "get_or_create",
            return_value=ConversationService.create(user.id, 999999),
        )

        result = ChatService.create_or_get_conversation(user.id, stylist.id)

        assert not result.success
        assert result.error_code == "PARTY_NOT_FOUND"


class TestChatServiceAccess:
    """Tests for party-scoped reads and sends."""

    def test_participants_can_read(self, conversation, user, stylist):
        assert ChatService.get_conversation_for_user(conversation.id, user.id).success
        assert ChatService.get_conversation_for_stylist(conversation.id, stylist.id).success

    def test_non_participant_looks_like_missing_chat(self, conversation, other_stylist):
        """
        Outsiders get the same failure as a nonexistent id.

        Why it matters: the response must not reveal that the chat exists.
        """
        forbidden = ChatService.get_conversation_for_stylist(conversation.id, other_stylist.id)
        missing = ChatService.get_conversation_for_stylist(999999, other_stylist.id)

        assert not forbidden.success
        assert (forbidden.error, forbidden.error_code) == (missing.error, missing.error_code)
        assert forbidden.error == "Chat not found"
        assert forbidden.error_code == "NOT_FOUND"

    def test_stylist_id_does_not_grant_user_access(self, db):
        """A user whose id equals the stylist's id is still an outsider."""
        stylist = StylistFactory(id=51)
        conversation = ConversationFactory(user=UserFactory(id=50), stylist=stylist)
        namesake = UserFactory(id=51)

        result = ChatService.get_conversation_for_party(
            Party.from_account(namesake), conversation.id
        )

        assert result.error_code == "NOT_FOUND"

    def test_send_as_party_dispatches_on_kind(self, conversation, user, stylist):
        from_user = ChatService.send_as_party(
            Party.from_account(user), conversation.id, "Hi"
        ).data
        from_stylist = ChatService.send_as_party(
            Party.from_account(stylist), conversation.id, "Hello"
        ).data

        assert from_user.is_from_user is True
        assert from_stylist.is_from_user is False

    def test_outsider_send_is_not_found(self, conversation, other_user):
        result = ChatService.send_as_user(conversation.id, other_user.id, "Hi")

        assert result.error == "Chat not found"
        assert result.error_code == "NOT_FOUND"
        assert not Message.objects.exists()

    def test_list_helpers(self, conversation, user, stylist):
        assert [c.id for c in ChatService.list_user_conversations(user.id)] == [conversation.id]
        assert [c.id for c in ChatService.list_stylist_conversations(stylist.id)] == [
            conversation.id
        ]
