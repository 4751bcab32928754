"""
Authentication models.

This module defines the two party stores that can take part in a chat:
- User: Consulting client, the Django AUTH_USER_MODEL
- Stylist: Fashion consultant with a separate credential store

Related files:
    - managers.py: Email-based managers for both stores
    - identity.py: Party value object and token resolution

Design Decisions:
    - Users and stylists are NOT unified into one table. Each keeps its own
      auto-incrementing id sequence, so the same numeric id can exist in
      both stores. Always compare parties by (kind, id).
    - Both stores hash passwords with Django's configured hashers.
"""

from django.contrib.auth.hashers import check_password, make_password
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import StylistManager, UserManager
from core.models import BaseModel


class PartyKind(models.TextChoices):
    """
    Kind tag of a chat participant.

    USER: Consulting client (authentication.User)
    STYLIST: Fashion consultant (authentication.Stylist)
    """

    USER = "user", "User"
    STYLIST = "stylist", "Stylist"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Consulting client using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        name: Display name shown to stylists in chat
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
            name="Kim Minji",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    name = models.CharField(
        max_length=100,
        help_text="Display name shown in chat",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    party_kind = PartyKind.USER

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"

    def __str__(self) -> str:
        return self.email

    @property
    def display_name(self) -> str:
        """Name shown to the other side of a conversation."""
        return self.name or self.email


class Stylist(BaseModel):
    """
    Fashion consultant that users can chat with.

    Stylists authenticate against this table, not against AUTH_USER_MODEL,
    and have their own id sequence.

    Fields:
        email: Login identifier, unique among stylists
        name: Display name shown to users in chat
        password: Hashed password (see set_password / check_password)
        profile_image_url: Public avatar
        rating: Average review rating (maintained by the reviews module)
        is_verified: Whether the stylist has been vetted by staff

    Usage:
        stylist = Stylist.objects.create_stylist(
            email="stylist@example.com",
            password="securepassword",
            name="Lee Fashion",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="Stylist's email address (login identifier)",
    )
    name = models.CharField(
        max_length=100,
        help_text="Display name shown in chat",
    )
    password = models.CharField(
        max_length=128,
        help_text="Hashed password",
    )
    profile_image_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Public profile image",
    )
    rating = models.FloatField(
        default=0.0,
        help_text="Average review rating (0-5)",
    )
    is_verified = models.BooleanField(
        default=False,
        help_text="Whether the stylist has been verified by staff",
    )

    objects = StylistManager()

    party_kind = PartyKind.STYLIST

    class Meta:
        db_table = "authentication_stylist"
        ordering = ["-created_at"]
        verbose_name = "stylist"
        verbose_name_plural = "stylists"

    def __str__(self) -> str:
        return self.email

    @property
    def display_name(self) -> str:
        """Name shown to the other side of a conversation."""
        return self.name or self.email

    def set_password(self, raw_password: str | None) -> None:
        """Hash and store the password (unusable when None)."""
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        """Check a raw password against the stored hash."""
        return check_password(raw_password, self.password)
