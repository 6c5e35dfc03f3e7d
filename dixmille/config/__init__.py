"""
Dix Mille Configuration.

Environment variables, settings, and logging configuration.
"""

from dixmille.config.settings import Settings, configure_logging, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
