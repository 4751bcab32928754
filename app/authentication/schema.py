"""
drf-spectacular extension describing PartyJWTAuthentication.

Imported from AuthenticationConfig.ready() so the extension is registered
before the schema is generated.
"""

from drf_spectacular.extensions import OpenApiAuthenticationExtension


class PartyJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "authentication.backends.PartyJWTAuthentication"
    name = "partyJwtAuth"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Access token carrying `user_id` and `user_type` "
                "(`user` or `stylist`) claims."
            ),
        }
