"""Clinic authentication and account lifecycle service."""

__version__ = "1.0.0"
