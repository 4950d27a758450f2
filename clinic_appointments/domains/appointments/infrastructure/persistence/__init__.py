"""
Appointment persistence layer.
"""
