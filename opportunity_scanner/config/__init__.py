"""
Configuration package for the Opportunity Scanner service.
"""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
