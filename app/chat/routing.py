"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - Single chat socket per client; conversations are joined
               with the joinChat command

Authentication:
    Pass the access token as ?token=<jwt>, as the subprotocol pair
    ["jwt", <jwt>], or in an Authorization: Bearer header. TokenAuthMiddleware
    extracts it and ChatConsumer verifies it.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.ChatConsumer.as_asgi()),
]
