"""
Hotelogix Adapter (cloud PMS for small and mid-size hotels)
"""

from .adapter import HotelogixAdapter

__all__ = ["HotelogixAdapter"]
