"""
Root pytest configuration.

Provides environment defaults so settings import without a .env file.
Django setup and app-wide test settings live in app/conftest.py; app-specific
fixtures are defined in each app's tests/conftest.py.
"""

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
