"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User and Stylist stores
- test_identity.py: IdentityResolver and Party
- test_backends.py: Bearer authentication and party-kind permissions

Usage:
    pytest authentication/tests/
    pytest authentication/tests/test_identity.py
"""
