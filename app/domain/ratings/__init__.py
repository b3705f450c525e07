"""Ratings domain - ratings panel, reviews and moderation"""

from .router import router

__all__ = ["router"]
