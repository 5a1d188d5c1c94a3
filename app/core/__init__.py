"""
Core Application - Infrastructure & Base Classes

Generic, reusable building blocks shared by the domain apps:

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Input validation failures
    - NotFoundError: Resource not found
    - PermissionDeniedError: Operation not allowed
    - ConflictError: State conflicts
    - ExternalServiceError: Third-party service failures

Exception handling (core.exception_handler):
    - application_exception_handler: DRF handler rendering the errors above

Note:
    Models and model mixins are NOT imported here because they depend on
    Django's app registry being ready. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
