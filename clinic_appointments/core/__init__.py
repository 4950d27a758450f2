"""
Core building blocks: domain base classes, shared utilities and wiring.
"""
