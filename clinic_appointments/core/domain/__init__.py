"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity, provenance and void support
- Value Objects: Immutable objects compared by value
- Exceptions: Workflow error taxonomy
"""

from clinic_appointments.core.domain.entities import (
    AuditableEntity,
    Entity,
    VoidableEntity,
    generate_uuid_str,
)
from clinic_appointments.core.domain.exceptions import (
    AuthorizationException,
    BusinessRuleViolationException,
    ConflictStateException,
    DomainException,
    EntityNotFoundException,
    IllegalTransitionException,
    SerializationException,
    ValidationException,
)
from clinic_appointments.core.domain.value_objects import (
    StatusEnum,
    ValueObject,
)

__all__ = [
    # Entities
    "Entity",
    "AuditableEntity",
    "VoidableEntity",
    "generate_uuid_str",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "AuthorizationException",
    "IllegalTransitionException",
    "ConflictStateException",
    "SerializationException",
]
