"""
Guesty Open API Adapter (vacation rentals)
"""

from .adapter import GuestyAdapter

__all__ = ["GuestyAdapter"]
