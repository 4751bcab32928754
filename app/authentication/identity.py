"""
Identity resolution for both HTTP requests and WebSocket handshakes.

This module provides:
- Party: Immutable value object for an authenticated user or stylist
- IdentityResolver: Verifies bearer tokens and loads the party they name

Token Claims:
    user_id: Numeric id in the store named by user_type
    user_type: "user" or "stylist"
    email, name: Informational only, never trusted for identity

Kind Probe:
    Tokens minted by older clients may lack ``user_type``. HTTP requests
    reject such tokens. WebSocket handshakes (``allow_kind_probe=True``)
    fall back to probing the User store first and the Stylist store second.
    Because the two id sequences are independent, an id present in both
    stores always resolves to the user.

Usage:
    from authentication.identity import IdentityResolver

    party = IdentityResolver.resolve(token)
    if party.is_stylist:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from authentication.exceptions import InvalidCredentialError, PartyNotFoundError
from authentication.models import PartyKind, Stylist, User
from core.services import BaseService

if TYPE_CHECKING:
    from typing import Union

    Account = Union[User, Stylist]

USER_TYPE_CLAIM = "user_type"

_STORES = {
    PartyKind.USER: User,
    PartyKind.STYLIST: Stylist,
}


@dataclass(frozen=True)
class Party:
    """
    An authenticated chat participant.

    Attached to ``request.user`` by PartyJWTAuthentication and held by the
    WebSocket consumer for the lifetime of a connection. Two parties are equal
    only if both kind and id match.
    """

    kind: str
    id: int
    email: str = field(default="", compare=False)
    name: str = field(default="", compare=False)

    # DRF's IsAuthenticated and throttling look at these
    is_authenticated = True
    is_anonymous = False

    @classmethod
    def from_account(cls, account: Account) -> Party:
        return cls(
            kind=str(account.party_kind),
            id=account.pk,
            email=account.email,
            name=account.name,
        )

    @property
    def pk(self) -> str:
        # Unique across both stores, used for throttle cache keys
        return f"{self.kind}:{self.id}"

    @property
    def is_user(self) -> bool:
        return self.kind == PartyKind.USER

    @property
    def is_stylist(self) -> bool:
        return self.kind == PartyKind.STYLIST

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def __str__(self) -> str:
        return f"{self.kind} {self.id}"


class IdentityResolver(BaseService):
    """
    Maps a bearer token to a Party.

    Stateless and side-effect free. Every failure is raised as an exception
    so both transports can map it to their own error shape.
    """

    @classmethod
    def resolve(cls, token: str | None, *, allow_kind_probe: bool = False) -> Party:
        """
        Verify ``token`` and load the party it names.

        Args:
            token: Encoded JWT access token
            allow_kind_probe: Probe User then Stylist when the token does not
                declare a kind (WebSocket handshake only)

        Raises:
            InvalidCredentialError: Token missing, malformed, expired,
                tampered, or without a usable subject/kind
            PartyNotFoundError: Token verified but the party does not exist
        """
        if not token:
            raise InvalidCredentialError("Authentication credentials were not provided")

        try:
            validated = AccessToken(token)
        except TokenError as e:
            cls.get_logger().info(f"Rejected token: {e}")
            raise InvalidCredentialError("Token is invalid or expired") from e

        try:
            party_id = int(validated[api_settings.USER_ID_CLAIM])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidCredentialError(
                "Token contained no recognizable party identification"
            ) from e

        declared_kind = validated.get(USER_TYPE_CLAIM)
        if declared_kind in PartyKind.values:
            return cls.load_party(declared_kind, party_id)

        if not allow_kind_probe:
            raise InvalidCredentialError("Token does not declare a party kind")

        for kind in (PartyKind.USER, PartyKind.STYLIST):
            account = _STORES[kind].objects.filter(pk=party_id).first()
            if account is not None:
                cls.get_logger().debug(f"Kind probe resolved id {party_id} as {kind}")
                return Party.from_account(account)

        raise PartyNotFoundError(
            "Party not found",
            details={"id": party_id},
        )

    @classmethod
    def load_party(cls, kind: str, party_id: int) -> Party:
        """
        Load a party from the store named by ``kind``.

        Raises:
            PartyNotFoundError: No such row in that store
        """
        account = _STORES[PartyKind(kind)].objects.filter(pk=party_id).first()
        if account is None:
            raise PartyNotFoundError(
                f"{PartyKind(kind).label} not found",
                details={"kind": kind, "id": party_id},
            )
        return Party.from_account(account)

    @classmethod
    def issue_token(cls, account: Account) -> str:
        """
        Sign an access token for a user or stylist.

        Login endpoints live outside this service; this is the single place
        that knows which claims the resolver expects.
        """
        token = AccessToken()
        token[api_settings.USER_ID_CLAIM] = account.pk
        token[USER_TYPE_CLAIM] = str(account.party_kind)
        token["email"] = account.email
        token["name"] = account.name
        return str(token)
