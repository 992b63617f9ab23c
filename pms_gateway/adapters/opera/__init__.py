"""
Oracle Opera Cloud Adapter (OHIP property, availability and reservation APIs)
"""

from .adapter import OperaAdapter

__all__ = ["OperaAdapter"]
