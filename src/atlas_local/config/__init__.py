"""Configuration module for the Atlas Local extension backend."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
