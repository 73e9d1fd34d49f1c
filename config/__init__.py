"""
Application configuration
"""

from .settings import Settings, settings, configure_logging

__all__ = ["Settings", "settings", "configure_logging"]
