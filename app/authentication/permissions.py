"""
Party kind permissions.

Endpoints are split by kind: ``/chat/user/...`` requires a user token and
``/chat/stylist/...`` requires a stylist token. An authenticated party of
the wrong kind gets 403, an unauthenticated request gets 401.
"""

from rest_framework.permissions import BasePermission

from authentication.models import PartyKind


class _PartyKindPermission(BasePermission):
    required_kind: str = ""

    def has_permission(self, request, view):
        party = request.user
        if not getattr(party, "is_authenticated", False):
            return False
        return getattr(party, "kind", None) == self.required_kind


class IsUserParty(_PartyKindPermission):
    """Allow only authenticated users (consulting clients)."""

    message = "This endpoint is only available to users."
    required_kind = PartyKind.USER


class IsStylistParty(_PartyKindPermission):
    """Allow only authenticated stylists."""

    message = "This endpoint is only available to stylists."
    required_kind = PartyKind.STYLIST
