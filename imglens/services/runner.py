"""
Filter runner: decode, process, encode.

Glues the OpenImageIO codec to the ProcessingExecutor. Used by the
command-line interface for single operations and for whole pipelines.
"""

import time
from pathlib import Path
from typing import Callable, Optional, Union

from ..core import Image
from ..lens import Materializer, create_materializer
from ..oiio import OiioAdapter
from ..processing import ProcessingExecutor, ProcessingFilter, ProcessingPipeline
from ..utils.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]
Operation = Callable[[Image, Materializer], Image]


class FilterRunner:
    """Runs operations on image files."""

    def __init__(
        self,
        threads: Optional[Union[int, str]] = None,
        progress: Optional[Callable[[int], None]] = None,
    ):
        """
        Args:
            threads: None for sequential materialization, otherwise "auto"
                or a positive worker count
            progress: Optional callback receiving a percentage per stage
        """
        self.materializer = create_materializer(threads, progress)
        self.executor = ProcessingExecutor(self.materializer)

    def run_operation(
        self,
        input_path: PathLike,
        output_path: PathLike,
        operation: Operation,
        name: str = "operation",
    ) -> Image:
        """Read input_path, apply operation(image, materializer), write output_path."""
        image = OiioAdapter.read_image(input_path)

        started = time.perf_counter()
        logger.info("Running %s on %dx%d with %r", name, image.width, image.height, self.materializer)
        result = operation(image, self.materializer)
        logger.info("%s finished in %.3fs", name, time.perf_counter() - started)

        self._write(result, output_path)
        return result

    def run_filter(
        self,
        input_path: PathLike,
        output_path: PathLike,
        filter: ProcessingFilter,
    ) -> Image:
        """Apply a single configured filter to a file."""
        pipeline = ProcessingPipeline()
        pipeline.add_filter(filter)
        return self.run_pipeline(input_path, output_path, pipeline)

    def run_pipeline(
        self,
        input_path: PathLike,
        output_path: PathLike,
        pipeline: ProcessingPipeline,
    ) -> Image:
        """Apply every enabled filter of a pipeline to a file."""
        image = OiioAdapter.read_image(input_path)

        started = time.perf_counter()
        result = self.executor.execute(image, pipeline)
        logger.info(
            "Pipeline of %d filter(s) finished in %.3fs",
            len(pipeline.get_enabled_filters()), time.perf_counter() - started,
        )

        self._write(result, output_path)
        return result

    @staticmethod
    def _write(image: Image, output_path: PathLike) -> None:
        output_path = Path(output_path)
        if output_path.parent and not output_path.parent.exists():
            output_path.parent.mkdir(parents=True, exist_ok=True)
        OiioAdapter.write_image(image, output_path)
