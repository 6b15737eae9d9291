"""
Package: config
Description: Application configuration loaded from the environment.
"""

from .settings import BackendMode, Settings, settings

__all__ = ["BackendMode", "Settings", "settings"]
