"""
Django admin configuration for authentication models.

This module registers User and Stylist with the Django admin site.

Related files:
    - models.py: Model definitions
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import Stylist, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Customized for email-based authentication (no username field).
    """

    list_display = (
        "email",
        "name",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = (
        "is_active",
        "is_staff",
        "is_superuser",
        "date_joined",
    )
    search_fields = ("email", "name")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "name", "password")}),
        (
            "Status",
            {"fields": ("is_active", "is_staff", "is_superuser")},
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")


@admin.register(Stylist)
class StylistAdmin(admin.ModelAdmin):
    """
    Admin configuration for Stylist model.

    Passwords are hashed by the manager and never edited here.
    """

    list_display = (
        "email",
        "name",
        "rating",
        "is_verified",
        "created_at",
    )
    list_filter = ("is_verified", "created_at")
    search_fields = ("email", "name")
    ordering = ("-created_at",)

    exclude = ("password",)
    readonly_fields = ("rating", "created_at", "updated_at")
