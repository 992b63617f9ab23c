from .adapter import HostawayAdapter

__all__ = ["HostawayAdapter"]
