"""
Materializers: realize a lens into concrete data.

The sequential materializer walks rows in order and is the reference. The
parallel materializer splits the rows into contiguous chunks, runs them on a
ThreadPoolExecutor, and has every worker write only its own rows. Lens
evaluation is pure, so both produce identical results.
"""

import os
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, List, Optional, Tuple, Union

import numpy as np

from ..core import Image, InvalidParameterError
from ..utils.logging import get_logger
from .base import Lens
from .sources import MaterializedLens

logger = get_logger(__name__)

AUTO_THREADS = "auto"

ProgressCallback = Callable[[int], None]


def resolve_thread_count(threads: Union[int, str]) -> int:
    """
    Resolve a worker count.

    Args:
        threads: "auto" for the number of logical processors, or a positive
            integer (int or decimal string)

    Raises:
        InvalidParameterError: for anything else
    """
    if isinstance(threads, str):
        text = threads.strip().lower()
        if text == AUTO_THREADS:
            return os.cpu_count() or 1
        if not text.isdigit():
            raise InvalidParameterError(
                f"threads must be '{AUTO_THREADS}' or a positive integer, got {threads!r}"
            )
        threads = int(text)
    elif isinstance(threads, bool) or not isinstance(threads, int):
        raise InvalidParameterError(
            f"threads must be '{AUTO_THREADS}' or a positive integer, got {threads!r}"
        )

    if threads <= 0:
        raise InvalidParameterError(f"threads must be positive, got {threads}")
    return threads


class AtomicProgress:
    """Thread-safe progress counter for parallel workers."""

    def __init__(self, total: int):
        self.lock = threading.Lock()
        self.completed = 0
        self.total = total

    def increment(self, amount: int = 1) -> int:
        """
        Increment progress counter.
        Returns current percentage (0-100).
        """
        with self.lock:
            self.completed += amount
            return int((self.completed / self.total) * 100)


class Materializer(ABC):
    """Strategy that evaluates a lens over its whole domain."""

    def __init__(self, progress: Optional[ProgressCallback] = None):
        self.progress = progress

    @abstractmethod
    def evaluate(self, lens: Lens) -> List[List[Any]]:
        """Evaluate every point; returns the values as a list of rows."""

    def collect(self, lens: Lens) -> MaterializedLens:
        return MaterializedLens(self.evaluate(lens))

    def materialize(self, lens: Lens) -> Image:
        """Evaluate a pixel lens into a new Image of the lens dimensions."""
        grid = self.evaluate(lens)
        try:
            array = np.array(grid, dtype=np.uint8)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidParameterError(
                f"lens values are not RGBA8 pixels: {e}"
            ) from e
        return Image.from_array(array)

    def _report(self, percent: int) -> None:
        if self.progress is not None:
            self.progress(percent)


class SequentialMaterializer(Materializer):
    """Reference materializer: row-major order on the calling thread."""

    def evaluate(self, lens: Lens) -> List[List[Any]]:
        width, height = lens.dimensions()
        logger.debug("Materializing %dx%d sequentially", width, height)

        grid: List[Optional[List[Any]]] = [None] * height
        last_percent = -1
        for y in range(height):
            _fill_rows(lens, grid, y, y + 1)
            percent = int(((y + 1) / height) * 100)
            if percent != last_percent:
                self._report(percent)
                last_percent = percent
        return grid

    def __repr__(self) -> str:
        return "SequentialMaterializer()"


class ParallelMaterializer(Materializer):
    """Materializer that evaluates contiguous row chunks on a thread pool."""

    def __init__(
        self,
        threads: Union[int, str] = AUTO_THREADS,
        progress: Optional[ProgressCallback] = None,
    ):
        super().__init__(progress)
        self.threads = resolve_thread_count(threads)

    def chunks(self, height: int) -> List[Tuple[int, int]]:
        """
        Split [0, height) into contiguous (start, stop) row ranges.

        At most one chunk per worker and never more chunks than rows.
        """
        workers = max(1, min(self.threads, height))
        size = -(-height // workers)
        return [(start, min(start + size, height)) for start in range(0, height, size)]

    def evaluate(self, lens: Lens) -> List[List[Any]]:
        width, height = lens.dimensions()
        chunks = self.chunks(height)
        logger.debug(
            "Materializing %dx%d on %d worker(s), %d chunk(s)",
            width, height, self.threads, len(chunks),
        )

        grid: List[Optional[List[Any]]] = [None] * height
        progress = AtomicProgress(height)

        with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
            futures = {
                executor.submit(_fill_rows, lens, grid, start, stop): (start, stop)
                for start, stop in chunks
            }

            # Process completions as they arrive
            for future in as_completed(futures):
                start, stop = futures[future]
                try:
                    rows = future.result()
                except Exception:
                    executor.shutdown(wait=False, cancel_futures=True)
                    logger.debug("Chunk rows %d-%d failed", start, stop - 1)
                    raise
                percent = progress.increment(rows)
                logger.debug("Chunk rows %d-%d done (%d%%)", start, stop - 1, percent)
                self._report(percent)

        return grid

    def __repr__(self) -> str:
        return f"ParallelMaterializer(threads={self.threads})"


def create_materializer(
    threads: Optional[Union[int, str]] = None,
    progress: Optional[ProgressCallback] = None,
) -> Materializer:
    """Sequential materializer when threads is None, parallel otherwise."""
    if threads is None:
        return SequentialMaterializer(progress)
    return ParallelMaterializer(threads, progress)


def _fill_rows(lens: Lens, grid: list, start: int, stop: int) -> int:
    """Evaluate rows [start, stop) into grid. Touches no other rows."""
    width = lens.dimensions()[0]
    look = lens._look
    for y in range(start, stop):
        grid[y] = [look(x, y) for x in range(width)]
    return stop - start
