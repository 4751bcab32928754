"""
Test configuration and fixtures for chat tests.

This module provides:
- User and stylist fixtures (participants and outsiders)
- A conversation between the participating pair
- Tokens and authenticated API clients for each party

Usage:
    def test_example(conversation, user_client):
        response = user_client.get(f"/api/v1/chat/user/chats/{conversation.id}/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.identity import IdentityResolver
from authentication.tests.factories import StylistFactory, UserFactory
from chat.tests.factories import ConversationFactory


def _client_for(account) -> APIClient:
    client = APIClient()
    client.credentials(
        HTTP_AUTHORIZATION=f"Bearer {IdentityResolver.issue_token(account)}"
    )
    return client


# =============================================================================
# Party Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Consulting client taking part in ``conversation``."""
    return UserFactory(name="Kim Minji")


@pytest.fixture
def stylist(db):
    """Stylist taking part in ``conversation``."""
    return StylistFactory(name="Lee Fashion")


@pytest.fixture
def other_user(db):
    """User with no access to ``conversation``."""
    return UserFactory(name="Park Jisoo")


@pytest.fixture
def other_stylist(db):
    """Stylist with no access to ``conversation``."""
    return StylistFactory(name="Choi Style")


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def conversation(db, user, stylist):
    """Conversation between ``user`` and ``stylist`` with no messages."""
    return ConversationFactory(user=user, stylist=stylist)


# =============================================================================
# Token and Client Fixtures
# =============================================================================


@pytest.fixture
def user_token(user):
    return IdentityResolver.issue_token(user)


@pytest.fixture
def stylist_token(stylist):
    return IdentityResolver.issue_token(stylist)


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user_client(user):
    """API client authenticated as ``user``."""
    return _client_for(user)


@pytest.fixture
def stylist_client(stylist):
    """API client authenticated as ``stylist``."""
    return _client_for(stylist)


@pytest.fixture
def other_user_client(other_user):
    return _client_for(other_user)


@pytest.fixture
def other_stylist_client(other_stylist):
    return _client_for(other_stylist)


# =============================================================================
# Channel Layer
# =============================================================================


@pytest.fixture(autouse=True)
def in_memory_channel_layer(settings):
    """
    Fresh in-memory channel layer for every test.

    Changing CHANNEL_LAYERS makes channels drop its cached layer, so groups
    and queues never leak between tests or event loops.
    """
    settings.CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
    }
