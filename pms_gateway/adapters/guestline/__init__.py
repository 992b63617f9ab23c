"""
Guestline Rezlynx Adapter (UK market)
"""

from .adapter import GuestlineAdapter

__all__ = ["GuestlineAdapter"]
