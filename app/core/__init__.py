"""Core: config, constants, and component wiring.

Single place for settings and shared constants.
"""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
