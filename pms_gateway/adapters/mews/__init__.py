"""
Mews Connector API Adapter

Every call is a JSON POST carrying ClientToken, AccessToken and Client in
the body.
"""

from .adapter import MewsAdapter

__all__ = ["MewsAdapter"]
