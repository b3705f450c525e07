"""Availability domain - recurring slot generation"""

from .router import router

__all__ = ["router"]
