"""
Apaleo PMS Adapter

Modern cloud-native PMS with good REST API coverage and a sandbox
environment; authenticated with OAuth2 client credentials.
"""

from .adapter import ApaleoAdapter

__all__ = ["ApaleoAdapter"]
