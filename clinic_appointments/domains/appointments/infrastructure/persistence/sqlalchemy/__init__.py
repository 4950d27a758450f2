"""
Appointment SQLAlchemy persistence models.
"""

from .models import AppointmentAuditModel, AppointmentModel, AppointmentProviderModel

__all__ = ["AppointmentModel", "AppointmentProviderModel", "AppointmentAuditModel"]
