"""Utility helpers for img-lens."""

from .logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
