"""
Cloudbeds API v1.2 Adapter
"""

from .adapter import CloudbedsAdapter

__all__ = ["CloudbedsAdapter"]
