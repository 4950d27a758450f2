"""
Helpers shared by the workflow use-case responses.
"""

from typing import Any

from clinic_appointments.core.domain import DomainException, ValidationException

INTERNAL_ERROR = "INTERNAL_ERROR"


def error_fields(error: DomainException) -> dict[str, Any]:
    """Response fields describing a domain error."""
    return {
        "error": error.message,
        "error_code": error.code,
        "violations": list(error.violations) if isinstance(error, ValidationException) else [],
    }
