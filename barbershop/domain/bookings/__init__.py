"""Bookings domain - slot booking, appointment listings and payment reconciliation"""

from .router import router

__all__ = ["router"]
