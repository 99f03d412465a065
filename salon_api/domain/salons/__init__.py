"""Salons Domain - salon, staff, service and calendar configuration"""

from .router import router

__all__ = ["router"]
