"""
Infor HMS Adapter (multi-tenant enterprise PMS)
"""

from .adapter import InforHMSAdapter

__all__ = ["InforHMSAdapter"]
