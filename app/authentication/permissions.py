"""
Role-based permission classes.

- IsAdminRole: authenticated user holding the admin role
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsAdminRole(permissions.BasePermission):
    """
    Allows access only to users with the admin role.

    Ledger management is restricted to admins; salespeople only see the
    received-payments feed.
    """

    message = "Admin role required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)
