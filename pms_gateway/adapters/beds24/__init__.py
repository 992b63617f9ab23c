"""
Beds24 JSON API Adapter
"""

from .adapter import Beds24Adapter

__all__ = ["Beds24Adapter"]
