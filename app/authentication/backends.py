"""
DRF authentication class for user and stylist bearer tokens.

Related files:
    - identity.py: IdentityResolver does the actual verification
    - permissions.py: Kind checks applied after authentication
    - schema.py: OpenAPI security scheme for this class
"""

import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import HTTP_HEADER_ENCODING
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

from authentication.identity import IdentityResolver
from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)

AUTH_HEADER_TYPE = "Bearer"


class PartyJWTAuthentication(BaseAuthentication):
    """
    Authenticate ``Authorization: Bearer <token>`` as a Party.

    Returns None when no bearer header is present so that IsAuthenticated
    produces the 401. Tokens must declare their kind; the kind probe is
    reserved for WebSocket handshakes.
    """

    www_authenticate_realm = "api"

    def authenticate(self, request):
        token = self.get_raw_token(request)
        if token is None:
            return None

        try:
            party = IdentityResolver.resolve(token)
        except BaseApplicationError as e:
            logger.info(f"HTTP authentication failed: {e}")
            raise AuthenticationFailed(e.message, code=e.error_code.lower()) from e

        return party, token

    def authenticate_header(self, request):
        return f'{AUTH_HEADER_TYPE} realm="{self.www_authenticate_realm}"'

    def get_raw_token(self, request) -> str | None:
        header = request.META.get("HTTP_AUTHORIZATION")
        if not header:
            return None

        if isinstance(header, bytes):
            header = header.decode(HTTP_HEADER_ENCODING)

        parts = header.split()
        if not parts or parts[0] != AUTH_HEADER_TYPE:
            return None

        if len(parts) != 2:
            raise AuthenticationFailed(
                _("Authorization header must contain two space-delimited values"),
                code="bad_authorization_header",
            )

        return parts[1]
