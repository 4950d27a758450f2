"""
Shared utilities used across the appointment workflow engine.
"""

from clinic_appointments.core.shared.logger import (
    ColoredFormatter,
    ContextLogger,
    JSONFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    get_workflow_logger,
)

__all__ = [
    "ColoredFormatter",
    "ContextLogger",
    "JSONFormatter",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "get_workflow_logger",
]
