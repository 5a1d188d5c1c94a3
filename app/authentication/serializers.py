"""
Serializers for authentication models.

Related files:
    - models.py: User model
    - views.py: Views that use these serializers
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """Read-only representation of the current user."""

    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "full_name",
            "role",
            "date_joined",
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in ledger records (created_by)."""

    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields
