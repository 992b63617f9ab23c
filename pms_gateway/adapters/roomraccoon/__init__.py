"""
RoomRaccoon Adapter
"""

from .adapter import RoomRaccoonAdapter

__all__ = ["RoomRaccoonAdapter"]
