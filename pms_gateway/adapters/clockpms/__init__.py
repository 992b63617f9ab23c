"""
Clock PMS+ Adapter (cloud PMS popular with independent European hotels)
"""

from .adapter import ClockPMSAdapter

__all__ = ["ClockPMSAdapter"]
