"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps. Nothing in here knows
about donations, beneficiaries or transfers.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Business rule violations
    - NotFoundError: Resource or state not found
    - PermissionDeniedError: Authorization failures
    - ConflictError: State conflicts
    - ExternalServiceError: Collaborator failures

Views (import from core.views):
    - health_check: Liveness/readiness probe
"""
