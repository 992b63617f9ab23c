"""
Protel Air Adapter (widespread in DACH hotels)
"""

from .adapter import ProtelAdapter

__all__ = ["ProtelAdapter"]
