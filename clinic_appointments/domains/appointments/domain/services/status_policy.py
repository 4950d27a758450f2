"""
Status transition and access rules for appointments.

Pure domain logic: no persistence, no audit. The application-level
``AppointmentStatusMachine`` applies these rules before mutating.
"""

from collections.abc import Mapping

from clinic_appointments.core.domain import AuthorizationException, IllegalTransitionException

from ..entities.appointment import Appointment
from ..value_objects.actor import (
    MANAGE_APPOINTMENTS,
    MANAGE_OWN_APPOINTMENTS,
    RESET_APPOINTMENT_STATUS,
    Actor,
)
from ..value_objects.appointment_status import AppointmentStatus

TransitionTable = Mapping[AppointmentStatus, frozenset[AppointmentStatus] | set[AppointmentStatus]]


class AppointmentAccessPolicy:
    """
    Self-or-all-access rule.

    An actor may act on an appointment when they hold "Manage Appointments",
    when no provider has accepted or is awaiting the appointment, or when
    they are the person behind one of the assigned providers.
    """

    def can_act_on(self, appointment: Appointment, actor: Actor) -> bool:
        return (
            actor.has_privilege(MANAGE_APPOINTMENTS)
            or appointment.is_unassigned()
            or appointment.has_provider_person(actor.person_uuid)
        )

    def ensure_can_act_on(self, appointment: Appointment, actor: Actor, operation: str) -> None:
        if not self.can_act_on(appointment, actor):
            raise AuthorizationException(
                operation=operation,
                resource=f"appointment {appointment.uuid}",
                required_privileges=[MANAGE_APPOINTMENTS, MANAGE_OWN_APPOINTMENTS],
            )


class StatusTransitionPolicy:
    """
    Transition-legality predicate over the open set of appointment statuses.

    Args:
        transitions: Optional table of allowed targets per current status.
            When omitted every status is reachable from every status and
            only the reset rule applies.

    Example:
        ```python
        policy = StatusTransitionPolicy({
            AppointmentStatus.SCHEDULED: {AppointmentStatus.CHECKED_IN, AppointmentStatus.CANCELLED},
        })
        policy.is_reachable(AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED)  # False
        ```
    """

    def __init__(self, transitions: TransitionTable | None = None):
        self._transitions = (
            {status: frozenset(targets) for status, targets in transitions.items()} if transitions is not None else None
        )

    def is_reachable(self, current: AppointmentStatus, target: AppointmentStatus) -> bool:
        """Check the transition table only (no privilege rules)."""
        if self._transitions is None:
            return True
        return target in self._transitions.get(current, frozenset())

    def is_allowed_to_reset(self, current: AppointmentStatus, target: AppointmentStatus, actor: Actor) -> bool:
        """
        Moving to Scheduled is a first scheduling only when coming from
        Requested; otherwise it is a reset and needs the reset privilege.
        """
        if target != AppointmentStatus.SCHEDULED:
            return True
        if current == AppointmentStatus.REQUESTED:
            return True
        return actor.has_privilege(RESET_APPOINTMENT_STATUS)

    def can_transition(self, current: AppointmentStatus, target: AppointmentStatus, actor: Actor) -> bool:
        return self.is_allowed_to_reset(current, target, actor) and self.is_reachable(current, target)

    def ensure_can_transition(self, appointment: Appointment, target: AppointmentStatus, actor: Actor) -> None:
        current = appointment.status
        if not self.is_allowed_to_reset(current, target, actor):
            raise IllegalTransitionException(
                current_status=current.value,
                target_status=target.value,
                required_privileges=[RESET_APPOINTMENT_STATUS],
            )
        if not self.is_reachable(current, target):
            raise IllegalTransitionException(current_status=current.value, target_status=target.value)

    @classmethod
    def from_names(cls, table: Mapping[str, list[str]] | None) -> "StatusTransitionPolicy":
        """Build a policy from a status-name table (as read from settings)."""
        if table is None:
            return cls()
        return cls(
            {
                AppointmentStatus.from_string(current): {AppointmentStatus.from_string(t) for t in targets}
                for current, targets in table.items()
            }
        )
