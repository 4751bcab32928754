"""
WebSocket token extraction middleware.

Finds the bearer token of a WebSocket handshake and stores it in the scope.
Verification happens in ChatConsumer.connect() so that a rejected client
still receives an ``error`` frame before the socket is closed.

Related files:
    - routing.py: WebSocket URL patterns
    - consumers.py: WebSocket handlers
    - config/asgi.py: ASGI configuration

Token Passing Methods (in order of precedence):
    1. Query string: ws://host/ws/chat/?token=<jwt_token>
    2. Subprotocol: Sec-WebSocket-Protocol: jwt, <jwt_token>
    3. Header: Authorization: Bearer <jwt_token> (non-browser clients)

Scope keys set:
    auth_token: The raw token, or None
    auth_subprotocol: "jwt" when the token came from the subprotocol, so
        the consumer can echo it when accepting
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.middleware import BaseMiddleware

from chat.constants import SOCKET_CONFIG

logger = logging.getLogger(__name__)


class TokenAuthMiddleware(BaseMiddleware):
    """
    Attach the handshake token to the scope.

    Usage:
        # In asgi.py
        application = ProtocolTypeRouter({
            "websocket": TokenAuthMiddleware(
                URLRouter(websocket_urlpatterns)
            ),
        })

        # Client connection with query string
        ws = new WebSocket("ws://host/ws/chat/?token=eyJ...")

        # Client connection with subprotocol
        ws = new WebSocket("ws://host/ws/chat/", ["jwt", "eyJ..."])
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        scope["auth_token"] = None
        scope["auth_subprotocol"] = None

        token = self._get_token_from_query(scope)
        if token is None:
            token = self._get_token_from_subprotocol(scope)
            if token is not None:
                scope["auth_subprotocol"] = SOCKET_CONFIG.TOKEN_SUBPROTOCOL
        if token is None:
            token = self._get_token_from_header(scope)

        scope["auth_token"] = token
        return await super().__call__(scope, receive, send)

    def _get_token_from_query(self, scope) -> str | None:
        query_string = scope.get("query_string", b"").decode()
        params = parse_qs(query_string)
        token_list = params.get("token", [])

        return token_list[0] if token_list else None

    def _get_token_from_subprotocol(self, scope) -> str | None:
        """
        Extract token from WebSocket subprotocol.

        Expects: Sec-WebSocket-Protocol: jwt, <token>
        """
        subprotocols = scope.get("subprotocols", [])

        if len(subprotocols) >= 2 and subprotocols[0] == SOCKET_CONFIG.TOKEN_SUBPROTOCOL:
            return subprotocols[1]

        return None

    def _get_token_from_header(self, scope) -> str | None:
        for name, value in scope.get("headers", []):
            if name.lower() != b"authorization":
                continue
            parts = value.decode("latin1").split()
            if len(parts) == 2 and parts[0] == "Bearer":
                return parts[1]
            logger.debug("Ignoring malformed Authorization header on WebSocket handshake")
        return None
