"""
Processing system for img-lens.

Filter operations are expressed as lenses over an Image. Filters are stored
as configurations in a ProcessingPipeline and applied in order by the
ProcessingExecutor, one materialized stage per filter.
"""

from .color import (
    grayscale,
    sepia,
    negative,
    gamma_correction,
    grayscale_lens,
    sepia_lens,
    negative_lens,
    gamma_lens,
    luma,
)
from .blur import (
    convolve_lens,
    mean_blur,
    mean_blur_lens,
    gaussian_blur,
    gaussian_blur_lens,
)
from .kuwahara import kuwahara, kuwahara_lens
from .canny import canny, canny_stages, CannyStages, Direction, Gradient
from .crop import crop, crop_lens
from .resize import resize, resize_lens, scale, scale_size
from .filters import (
    ProcessingFilter,
    FilterParameter,
    ParameterType,
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
    create_filter,
    get_filters_by_category,
    get_all_categories,
    FILTER_REGISTRY,
)
from .pipeline import ProcessingPipeline
from .executor import ProcessingExecutor

__all__ = [
    # Operations
    "grayscale",
    "sepia",
    "negative",
    "gamma_correction",
    "grayscale_lens",
    "sepia_lens",
    "negative_lens",
    "gamma_lens",
    "luma",
    "convolve_lens",
    "mean_blur",
    "mean_blur_lens",
    "gaussian_blur",
    "gaussian_blur_lens",
    "kuwahara",
    "kuwahara_lens",
    "canny",
    "canny_stages",
    "CannyStages",
    "Direction",
    "Gradient",
    "crop",
    "crop_lens",
    "resize",
    "resize_lens",
    "scale",
    "scale_size",
    # Pipeline
    "ProcessingPipeline",
    "ProcessingFilter",
    "FilterParameter",
    "ParameterType",
    "ProcessingExecutor",
    # Helpers
    "create_filter",
    "get_filters_by_category",
    "get_all_categories",
    "FILTER_REGISTRY",
    # Filters
    "GrayscaleFilter",
    "SepiaFilter",
    "NegativeFilter",
    "GammaCorrectionFilter",
    "MeanBlurFilter",
    "GaussianBlurFilter",
    "KuwaharaFilter",
    "CannyFilter",
    "CropFilter",
    "ResizeFilter",
]
