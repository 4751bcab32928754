"""
URL configuration for the fashion consulting chat backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/chat/                  - Chat endpoints
        user/chats/                - User's chats (GET list, POST open)
        user/chats/{id}/           - Chat with messages
        user/chats/{id}/messages/  - Send message as user
        stylist/chats/             - Stylist's chats
        stylist/chats/{id}/        - Chat with messages
        stylist/chats/{id}/messages/ - Send message as stylist
    /ws/chat/                      - WebSocket (see chat/routing.py)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("chat/", include("chat.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Fashion Chat Admin"
admin.site.site_title = "Fashion Chat Admin"
admin.site.index_title = "Users, stylists and consulting chats"
