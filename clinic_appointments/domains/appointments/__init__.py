"""
Appointments bounded context.
"""
