"""
Acting identity passed explicitly through every workflow operation.
"""

from dataclasses import dataclass, field

from clinic_appointments.core.domain import ValueObject

MANAGE_APPOINTMENTS = "Manage Appointments"
MANAGE_OWN_APPOINTMENTS = "Manage Own Appointments"
RESET_APPOINTMENT_STATUS = "Reset Appointment Status"


@dataclass(frozen=True)
class Actor(ValueObject):
    """
    The user performing an operation.

    Example:
        ```python
        nurse = Actor(person_uuid="person-7", username="nurse", privileges=frozenset({MANAGE_APPOINTMENTS}))
        nurse.has_privilege(MANAGE_APPOINTMENTS)  # True
        ```
    """

    person_uuid: str | None
    username: str | None = None
    privileges: frozenset[str] = field(default_factory=frozenset)

    def _validate(self) -> None:
        if not isinstance(self.privileges, frozenset):
            object.__setattr__(self, "privileges", frozenset(self.privileges))

    def has_privilege(self, name: str) -> bool:
        return name in self.privileges

    def is_same_person(self, person_uuid: str | None) -> bool:
        return self.person_uuid is not None and self.person_uuid == person_uuid

    @property
    def audit_name(self) -> str | None:
        """Identifier written to audit records."""
        return self.username or self.person_uuid
