"""
Processing executor - applies filters to images via lens operations.

This module bridges the processing pipeline to the lens operations,
materializing each filter's output before the next one starts.
"""

from typing import Callable, Optional

from ..core import Image, ValidationEngine, ValidationSeverity
from ..lens import Materializer, SequentialMaterializer
from ..utils.logging import get_logger
from .pipeline import ProcessingPipeline
from .filters import (
    ProcessingFilter,
    GrayscaleFilter,
    SepiaFilter,
    NegativeFilter,
    GammaCorrectionFilter,
    MeanBlurFilter,
    GaussianBlurFilter,
    KuwaharaFilter,
    CannyFilter,
    CropFilter,
    ResizeFilter,
)
from .color import grayscale, sepia, negative, gamma_correction
from .blur import mean_blur, gaussian_blur
from .kuwahara import kuwahara
from .canny import canny
from .crop import crop
from .resize import resize

logger = get_logger(__name__)

StageCallback = Callable[[int, int, ProcessingFilter], None]


class ProcessingExecutor:
    """Executes a processing pipeline on Images."""

    def __init__(self, materializer: Optional[Materializer] = None):
        self.materializer = materializer or SequentialMaterializer()

    def execute(
        self,
        image: Image,
        pipeline: ProcessingPipeline,
        on_stage: Optional[StageCallback] = None,
    ) -> Image:
        """
        Apply all enabled filters in pipeline to image sequentially.

        Args:
            image: Input image
            pipeline: Processing pipeline with filters
            on_stage: Optional callback(index, total, filter) called before
                each filter runs

        Returns:
            Processed image

        Raises:
            InvalidParameterError: if any filter is misconfigured for this
                input; raised before the first filter runs
        """
        issues = pipeline.validate(image.dimensions())
        for issue in issues:
            if issue.severity == ValidationSeverity.WARNING:
                logger.warning("%s", issue)
        ValidationEngine.raise_for_errors(issues)

        filters = pipeline.get_enabled_filters()
        result = image
        for index, filter in enumerate(filters):
            if on_stage is not None:
                on_stage(index, len(filters), filter)
            logger.info(
                "Stage %d/%d: %s on %dx%d",
                index + 1, len(filters), filter.name, result.width, result.height,
            )
            result = self.apply_filter(result, filter)

        return result

    def apply_filter(self, image: Image, filter: ProcessingFilter) -> Image:
        """
        Apply a single filter to an image.

        Raises:
            InvalidParameterError: on invalid filter parameters
            ValueError: for an unknown filter type
        """
        ValidationEngine.raise_for_errors(
            ProcessingPipeline(filters=[filter]).validate(image.dimensions())
        )
        m = self.materializer

        # Dispatch to appropriate handler
        if isinstance(filter, GrayscaleFilter):
            return grayscale(image, filter.channels(), m)

        elif isinstance(filter, SepiaFilter):
            return sepia(image, filter.channels(), m)

        elif isinstance(filter, NegativeFilter):
            return negative(image, filter.channels(), m)

        elif isinstance(filter, GammaCorrectionFilter):
            return gamma_correction(image, filter.value("gamma"), filter.channels(), m)

        elif isinstance(filter, MeanBlurFilter):
            return mean_blur(image, filter.value("radius"), filter.channels(), m)

        elif isinstance(filter, GaussianBlurFilter):
            return gaussian_blur(
                image, filter.value("radius"), filter.value("sigma"), filter.channels(), m
            )

        elif isinstance(filter, KuwaharaFilter):
            return kuwahara(image, filter.value("radius"), filter.channels(), m)

        elif isinstance(filter, CannyFilter):
            return canny(
                image,
                filter.value("radius"),
                filter.value("sigma"),
                filter.value("low_threshold"),
                filter.value("high_threshold"),
                m,
            )

        elif isinstance(filter, CropFilter):
            return crop(
                image,
                filter.value("width"),
                filter.value("height"),
                filter.value("offset_x"),
                filter.value("offset_y"),
                m,
            )

        elif isinstance(filter, ResizeFilter):
            return resize(image, filter.value("width"), filter.value("height"), m)

        else:
            raise ValueError(f"Unknown filter type: {type(filter)}")
