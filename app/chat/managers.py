"""
Query helpers for conversations.

ConversationQuerySet keeps the participancy filter and the join/prefetch
shapes used by the list and detail views in one place so REST and the
WebSocket gateway load the same data the same way.
"""

from django.db import models
from django.db.models import Prefetch

from authentication.models import PartyKind


class ConversationQuerySet(models.QuerySet):
    def for_party(self, kind: str, party_id: int):
        """Conversations the given party participates in."""
        if kind == PartyKind.USER:
            return self.filter(user_id=party_id)
        if kind == PartyKind.STYLIST:
            return self.filter(stylist_id=party_id)
        raise ValueError(f"Unknown party kind: {kind!r}")

    def with_parties(self):
        return self.select_related("user", "stylist")

    def with_latest_message(self):
        """
        Prefetch only the newest message of each conversation.

        The result is exposed as ``conversation.latest_messages`` (a list
        with zero or one element).
        """
        from chat.models import Message

        latest = Message.objects.order_by("-created_at", "-id")[:1]
        return self.prefetch_related(
            Prefetch("messages", queryset=latest, to_attr="latest_messages")
        )

    def with_messages(self):
        """Prefetch every message oldest first, with sender profiles joined."""
        from chat.models import Message

        messages = Message.objects.select_related(
            "sender", "stylist_sender"
        ).order_by("created_at", "id")
        return self.prefetch_related(
            Prefetch("messages", queryset=messages, to_attr="ordered_messages")
        )


class ConversationManager(models.Manager):
    def get_queryset(self) -> ConversationQuerySet:
        return ConversationQuerySet(self.model, using=self._db)

    def for_party(self, kind: str, party_id: int) -> ConversationQuerySet:
        return self.get_queryset().for_party(kind, party_id)

    def find_by_pair(self, user_id: int, stylist_id: int):
        """Return the conversation for this pair, or None."""
        return self.filter(user_id=user_id, stylist_id=stylist_id).first()
