"""
Core Application - Infrastructure & Base Classes

Generic, reusable building blocks shared by the domain apps
(authentication, chat, realtime). No domain logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Input validation failures

Views (import from core.views):
    - health_check: Liveness endpoint for load balancers
"""
