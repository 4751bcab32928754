"""
Authentication application.

This app owns the two kinds of chat participants and everything needed to
tell them apart on an incoming request or socket:

Key components:
    - User model: End users of the consulting service (AUTH_USER_MODEL)
    - Stylist model: Fashion consultants with their own credential store
    - Party: Runtime value object tagging an authenticated caller by kind
    - IdentityResolver: Bearer token -> Party resolution
    - PartyJWTAuthentication: DRF authentication class built on the resolver
    - IsUserParty / IsStylistParty: DRF permissions enforcing the caller kind

Users and stylists live in separate tables with independent id sequences,
so a Party is always identified by (kind, id), never by id alone.

Usage:
    from authentication.identity import IdentityResolver

    party = IdentityResolver.resolve(raw_token)
    if party.is_stylist:
        ...
"""
