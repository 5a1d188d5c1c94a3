"""
Authentication models.

This module defines the custom User model with email-based authentication
and a role that gates access to the ledger back office.

Related files:
    - managers.py: Custom user manager for email-based creation
    - permissions.py: Role-based DRF permission classes
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    """
    Roles a staff member can hold.

    Values:
        ADMIN: Full access to ledgers, entries and transactions
        SALESPERSON: Point-of-sale user; read access to the payments feed only
    """

    ADMIN = "admin", "Admin"
    SALESPERSON = "salesperson", "Salesperson"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        name: Display name shown on ledger records
        role: Back-office role (admin or salesperson)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email='cashier@example.com',
            password='securepassword',
            role=UserRole.SALESPERSON,
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name",
    )
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.SALESPERSON,
        db_index=True,
        help_text="Back-office role controlling ledger access",
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
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email.split("@")[0]

    @property
    def is_admin_role(self) -> bool:
        """Whether the user holds the admin role."""
        return self.role == UserRole.ADMIN
