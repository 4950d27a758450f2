"""
Database Module

SQLAlchemy declarative base and async engine/session helpers.
"""

from clinic_appointments.database.async_db import (
    dispose_engine,
    get_async_db_context,
    get_async_engine,
    get_session_factory,
    init_db,
)
from clinic_appointments.database.base import Base

__all__ = [
    "Base",
    "dispose_engine",
    "get_async_db_context",
    "get_async_engine",
    "get_session_factory",
    "init_db",
]
