"""OpenImageIO codec for img-lens."""

from .adapter import OiioAdapter, expand_to_rgba

__all__ = ["OiioAdapter", "expand_to_rgba"]
