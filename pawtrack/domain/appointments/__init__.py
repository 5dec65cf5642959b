"""Appointments domain - scheduling against the service catalog, and the calendar"""

from .router import router

__all__ = ["router"]
