"""
Configuration module for heteromap.

Uses pydantic-settings for environment variable loading.
"""

from heteromap.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
