"""
WebRezPro Adapter
"""

from .adapter import WebRezProAdapter

__all__ = ["WebRezProAdapter"]
