"""Utility helpers for the Atlas Local extension backend."""

from .logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
