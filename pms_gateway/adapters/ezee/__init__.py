"""
eZee Absolute Adapter
"""

from .adapter import EzeeAdapter

__all__ = ["EzeeAdapter"]
