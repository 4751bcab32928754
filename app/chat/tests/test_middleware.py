"""
Tests for TokenAuthMiddleware token extraction.

The middleware only finds the token; verification is covered by
test_consumers.py.
"""

from unittest.mock import AsyncMock

import pytest

from chat.middleware import TokenAuthMiddleware


async def _scope_seen_by_inner(**scope):
    inner = AsyncMock()
    middleware = TokenAuthMiddleware(inner)

    await middleware({"type": "websocket", **scope}, None, None)

    return inner.await_args.args[0]


class TestTokenExtraction:
    async def test_query_string(self):
        scope = await _scope_seen_by_inner(query_string=b"token=abc.def.ghi")

        assert scope["auth_token"] == "abc.def.ghi"
        assert scope["auth_subprotocol"] is None

    async def test_subprotocol(self):
        scope = await _scope_seen_by_inner(subprotocols=["jwt", "abc.def.ghi"])

        assert scope["auth_token"] == "abc.def.ghi"
        assert scope["auth_subprotocol"] == "jwt"

    async def test_authorization_header(self):
        scope = await _scope_seen_by_inner(
            headers=[(b"authorization", b"Bearer abc.def.ghi")]
        )

        assert scope["auth_token"] == "abc.def.ghi"

    async def test_query_string_wins(self):
        scope = await _scope_seen_by_inner(
            query_string=b"token=from-query",
            subprotocols=["jwt", "from-protocol"],
            headers=[(b"authorization", b"Bearer from-header")],
        )

        assert scope["auth_token"] == "from-query"
        assert scope["auth_subprotocol"] is None

    @pytest.mark.parametrize(
        "headers",
        [
            [(b"authorization", b"Token abc")],
            [(b"authorization", b"Bearer")],
            [(b"cookie", b"sessionid=1")],
        ],
    )
    async def test_no_usable_token(self, headers):
        scope = await _scope_seen_by_inner(headers=headers, subprotocols=["chat"])

        assert scope["auth_token"] is None
