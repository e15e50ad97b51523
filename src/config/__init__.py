"""
Configuration module for the Binder service.

This module provides centralized configuration management using pydantic-settings.
All environment variables and configuration values should be accessed through this module.

Usage:
    from config import get_settings

    settings = get_settings()
    page_size = settings.deck_page_size
"""

from config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
