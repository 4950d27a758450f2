"""
Clinic Appointments

Clinical appointment workflow engine: status state machine, validation and
conflict detection, multi-provider responses, reschedule and audit trail.
"""

__version__ = "0.1.0"
