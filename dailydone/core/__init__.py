"""Core app configuration, security and error taxonomy."""

from dailydone.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
