"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Conversation browsing with inline message history
- Message moderation (read-only content)
"""

from django.contrib import admin

from chat.models import Conversation, Message


class MessageInline(admin.TabularInline):
    """Inline display of messages in conversation admin."""

    model = Message
    extra = 0
    can_delete = False
    fields = ["created_at", "is_from_user", "sender", "stylist_sender", "content"]
    readonly_fields = fields
    ordering = ["created_at", "id"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    """Admin interface for Conversation model."""

    list_display = ["id", "user", "stylist", "created_at", "updated_at"]
    list_filter = ["created_at"]
    search_fields = ["id", "user__email", "stylist__email", "stylist__name"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["user", "stylist"]
    inlines = [MessageInline]
    ordering = ["-updated_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "conversation",
        "is_from_user",
        "sender",
        "stylist_sender",
        "content_preview",
        "created_at",
    ]
    list_filter = ["is_from_user", "created_at"]
    search_fields = ["content", "sender__email", "stylist_sender__email"]
    readonly_fields = [
        "conversation",
        "content",
        "is_from_user",
        "sender",
        "stylist_sender",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    def content_preview(self, obj):
        """Show first 50 characters of content."""
        return obj.content[:50] + "..." if len(obj.content) > 50 else obj.content

    content_preview.short_description = "Content"

    def has_add_permission(self, request):
        return False
