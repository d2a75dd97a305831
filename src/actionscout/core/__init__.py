"""Core actionscout functionality."""

from actionscout.core.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
