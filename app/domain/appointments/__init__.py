"""Appointments domain - booking, payment and status notifications"""

from .router import router

__all__ = ["router"]
