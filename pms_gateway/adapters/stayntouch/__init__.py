"""
StayNTouch Adapter (mobile-first PMS, OAuth2 client credentials)
"""

from .adapter import StayNTouchAdapter

__all__ = ["StayNTouchAdapter"]
