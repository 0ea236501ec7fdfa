"""
Lazy lens engine.

Lenses describe pixel transformations as pure functions of output
coordinates; materializers turn them into concrete images.
"""

from .base import Lens
from .sources import ImageLens, ValueLens, FunctionLens, MaterializedLens
from .combinators import Window, MapLens, WindowedLens, RemapLens, ZipLens
from .materialize import (
    AUTO_THREADS,
    AtomicProgress,
    Materializer,
    SequentialMaterializer,
    ParallelMaterializer,
    create_materializer,
    resolve_thread_count,
)

__all__ = [
    "Lens",
    "ImageLens",
    "ValueLens",
    "FunctionLens",
    "MaterializedLens",
    "Window",
    "MapLens",
    "WindowedLens",
    "RemapLens",
    "ZipLens",
    "AUTO_THREADS",
    "AtomicProgress",
    "Materializer",
    "SequentialMaterializer",
    "ParallelMaterializer",
    "create_materializer",
    "resolve_thread_count",
]
