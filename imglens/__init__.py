"""
img-lens: lazily evaluated pixel transformations over RGBA8 images.

Filters are expressed as lenses (pure functions of output coordinates) and
realized into concrete images by a sequential or a parallel materializer.
"""

__version__ = "0.3.0"
