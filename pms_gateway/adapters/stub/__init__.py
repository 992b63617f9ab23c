"""
Offline adapter returning fixed sample data
"""

from .adapter import StubAdapter

__all__ = ["StubAdapter"]
