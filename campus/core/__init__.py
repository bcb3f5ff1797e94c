"""Core: config, constants, and tenant context.

Single place for settings and shared constants.
"""

from campus.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
