"""Accounts domain - registration, login and password reset"""

from .router import router

__all__ = ["router"]
