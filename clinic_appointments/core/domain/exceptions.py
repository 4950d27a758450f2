"""
Domain Exceptions for the appointment workflow

Raised by the aggregate, the policies and the workflow services. The
workflow service lets them propagate; the application use cases turn them
into ``success=False`` responses using ``code`` and ``message``.
"""

from typing import Any


class DomainException(Exception):
    """
    Base of every appointment workflow error.

    Subclasses set ``default_code``; ``details`` holds the structured
    context a caller needs to react without parsing the message.
    """

    default_code = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class ValidationException(DomainException):
    """
    One or more validators rejected the appointment.

    ``violations`` keeps every message in validator order; the exception
    message joins them.
    """

    default_code = "VALIDATION_ERROR"

    def __init__(self, violations: list[str], message: str | None = None):
        self.violations = list(violations)
        super().__init__(
            message or "; ".join(self.violations) or "Validation failed",
            details={"violations": self.violations},
        )


class EntityNotFoundException(DomainException):
    """An appointment or provider entry referenced by uuid is missing."""

    default_code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any, message: str | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            message or f"{entity_type} '{entity_id}' does not exist",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class BusinessRuleViolationException(DomainException):
    """An aggregate invariant would break, e.g. the same provider assigned twice."""

    default_code = "BUSINESS_RULE_VIOLATION"

    def __init__(self, rule: str, message: str | None = None, details: dict[str, Any] | None = None):
        self.rule = rule
        super().__init__(message or f"Rule '{rule}' violated", details={**(details or {}), "rule": rule})


class AuthorizationException(DomainException):
    """The actor lacks a required privilege or is not the provider it claims to be."""

    default_code = "AUTHORIZATION_ERROR"

    def __init__(
        self,
        operation: str,
        resource: str | None = None,
        required_privileges: list[str] | None = None,
        message: str | None = None,
        code: str | None = None,
    ):
        self.operation = operation
        self.resource = resource
        self.required_privileges = list(required_privileges or [])
        if message is None:
            message = f"Not authorized to perform '{operation}'"
            if resource:
                message += f" on '{resource}'"
        super().__init__(
            message,
            code,
            {"operation": operation, "resource": resource, "required_privileges": self.required_privileges},
        )


class IllegalTransitionException(AuthorizationException):
    """The target status is not reachable from the current one for this actor."""

    default_code = "ILLEGAL_TRANSITION"

    def __init__(
        self,
        current_status: str,
        target_status: str,
        required_privileges: list[str] | None = None,
        message: str | None = None,
    ):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            operation="change_status",
            required_privileges=required_privileges,
            message=message or f"Cannot change status from '{current_status}' to '{target_status}'",
        )
        self.details.update(current_status=current_status, target_status=target_status)


class ConflictStateException(DomainException):
    """The appointment's state does not allow the operation, e.g. nothing to undo."""

    default_code = "CONFLICT_STATE"

    def __init__(self, message: str, operation: str | None = None, current_state: str | None = None):
        self.operation = operation
        self.current_state = current_state
        context = {"operation": operation, "current_state": current_state}
        super().__init__(message, details={k: v for k, v in context.items() if v})


class SerializationException(DomainException):
    default_code = "SERIALIZATION_ERROR"

    def __init__(self, message: str, original_error: Exception | None = None):
        self.original_error = original_error
        super().__init__(message, details={"original_error": str(original_error)} if original_error else None)
