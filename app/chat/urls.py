"""
URL configuration for chat app.

Routes:
    user/chats/       Endpoints for users (consulting clients)
    stylist/chats/    Endpoints for stylists

Mounted under /api/v1/chat/ in config/urls.py.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import StylistConversationViewSet, UserConversationViewSet

app_name = "chat"

router = DefaultRouter()
router.register(r"user/chats", UserConversationViewSet, basename="user-chat")
router.register(r"stylist/chats", StylistConversationViewSet, basename="stylist-chat")

urlpatterns = [
    path("", include(router.urls)),
]
