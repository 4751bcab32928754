"""
Test configuration and fixtures for authentication tests.

This module provides:
- User and stylist fixtures
- Token fixtures for both party kinds
- Helpers for building tokens with arbitrary claims

Usage:
    def test_example(user, user_token):
        party = IdentityResolver.resolve(user_token)
        assert party.id == user.id
"""

from datetime import timedelta

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from authentication.identity import IdentityResolver
from authentication.tests.factories import StylistFactory, UserFactory


# =============================================================================
# Party Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a consulting client."""
    return UserFactory(name="Kim Minji")


@pytest.fixture
def stylist(db):
    """Create a verified stylist."""
    return StylistFactory(name="Lee Fashion")


# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def user_token(user):
    """Access token declaring user_type=user."""
    return IdentityResolver.issue_token(user)


@pytest.fixture
def stylist_token(stylist):
    """Access token declaring user_type=stylist."""
    return IdentityResolver.issue_token(stylist)


@pytest.fixture
def make_token():
    """
    Build an access token with the given claims.

    Pass ``lifetime`` to control expiry (a negative timedelta yields an
    already expired token).

    Usage:
        token = make_token(user_id=1)  # no user_type claim
        expired = make_token(user_id=1, user_type="user", lifetime=timedelta(minutes=-5))
    """

    def _make_token(lifetime=None, **claims):
        token = AccessToken()
        if lifetime is not None:
            token.set_exp(lifetime=lifetime)
        for key, value in claims.items():
            token[key] = value
        return str(token)

    return _make_token


@pytest.fixture
def expired_lifetime():
    return timedelta(minutes=-5)


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()
