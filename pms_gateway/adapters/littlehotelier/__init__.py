"""
Little Hotelier Adapter (SiteMinder PMS for small properties)
"""

from .adapter import LittleHotelierAdapter

__all__ = ["LittleHotelierAdapter"]
