"""
Email-based managers for the two party stores.

This module provides:
- UserManager: create_user / create_superuser for the AUTH_USER_MODEL
- StylistManager: create_stylist for the separate stylist store

Related files:
    - models.py: User and Stylist models that use these managers

Security:
    - Passwords are always hashed before saving
    - Email addresses are normalized (lowercase domain)
"""

from django.contrib.auth.models import BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """
    Custom manager for User model with email-based authentication.

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
            name="Kim Minji",
        )

        admin = User.objects.create_superuser(
            email="admin@example.com",
            password="adminpassword",
            name="Admin",
        )
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user with the given email and password.

        Args:
            email: User's email address (required)
            password: User's password (unusable password when omitted)
            **extra_fields: Additional fields to set on the user

        Returns:
            User: The created user instance

        Raises:
            ValueError: If email is not provided
        """
        if not email:
            raise ValueError("The Email field must be set")

        email = self.normalize_email(email)

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser with the given email and password.

        Raises:
            ValueError: If is_staff or is_superuser is not True
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class StylistManager(models.Manager):
    """
    Manager for the Stylist store.

    Mirrors UserManager so both credential stores are created the same way.

    Usage:
        stylist = Stylist.objects.create_stylist(
            email="stylist@example.com",
            password="securepassword",
            name="Lee Fashion",
        )
    """

    def create_stylist(self, email, password=None, **extra_fields):
        """
        Create and save a stylist with a hashed password.

        Raises:
            ValueError: If email is not provided
        """
        if not email:
            raise ValueError("The Email field must be set")

        email = BaseUserManager.normalize_email(email)

        stylist = self.model(email=email, **extra_fields)
        stylist.set_password(password)
        stylist.save(using=self._db)
        return stylist
