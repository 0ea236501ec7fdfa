"""
Filter definitions for the processing pipeline.

Each filter is a parameter configuration for one image operation. The
ProcessingExecutor turns a configured filter into the matching lens
operation and materializes it.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, List, Dict, Tuple

from ..core import ChannelFlags, InvalidParameterError
from .blur import DEFAULT_BLUR_RADIUS, DEFAULT_GAUSSIAN_SIGMA
from .canny import (
    DEFAULT_CANNY_RADIUS,
    DEFAULT_CANNY_SIGMA,
    DEFAULT_LOW_THRESHOLD,
    DEFAULT_HIGH_THRESHOLD,
)
from .crop import validate_crop
from .kuwahara import DEFAULT_KUWAHARA_RADIUS


class ParameterType(Enum):
    """Type of filter parameter."""
    FLOAT = auto()
    INT = auto()
    CHANNELS = auto()


@dataclass
class FilterParameter:
    """A single parameter for a filter."""
    name: str
    param_type: ParameterType
    value: Any
    min_val: Optional[float] = None
    max_val: Optional[float] = None
    description: str = ""
    min_exclusive: bool = False

    def validate(self) -> tuple[bool, str]:
        """Validate parameter value. Returns (is_valid, error_message)."""

        if self.param_type == ParameterType.FLOAT:
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
                return False, f"{self.name} must be a number"
            if self.value != self.value:
                return False, f"{self.name} must not be NaN"
            if self.min_val is not None:
                if self.min_exclusive and self.value <= self.min_val:
                    return False, f"{self.name} must be > {self.min_val}"
                if self.value < self.min_val:
                    return False, f"{self.name} must be >= {self.min_val}"
            if self.max_val is not None and self.value > self.max_val:
                return False, f"{self.name} must be <= {self.max_val}"

        elif self.param_type == ParameterType.INT:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                return False, f"{self.name} must be an integer"
            if self.min_val is not None and self.value < self.min_val:
                return False, f"{self.name} must be >= {int(self.min_val)}"
            if self.max_val is not None and self.value > self.max_val:
                return False, f"{self.name} must be <= {int(self.max_val)}"

        elif self.param_type == ParameterType.CHANNELS:
            if not isinstance(self.value, str):
                return False, f"{self.name} must be a string such as 'RGB'"
            try:
                ChannelFlags.parse(self.value)
            except InvalidParameterError as e:
                return False, f"{self.name}: {e}"

        return True, ""


@dataclass
class ProcessingFilter:
    """Base class for all processing filters."""
    filter_id: str
    name: str
    category: str
    enabled: bool = True
    order: int = 0
    parameters: Dict[str, FilterParameter] = field(default_factory=dict)

    def validate_parameters(self) -> tuple[bool, List[str]]:
        """Validate all parameters. Returns (is_valid, list_of_errors)."""
        errors = []
        for param in self.parameters.values():
            is_valid, error_msg = param.validate()
            if not is_valid:
                errors.append(error_msg)
        return len(errors) == 0, errors

    def get_parameter(self, name: str) -> Optional[FilterParameter]:
        """Get a parameter by name."""
        return self.parameters.get(name)

    def value(self, name: str) -> Any:
        """Current value of a parameter; KeyError if the filter has none."""
        return self.parameters[name].value

    def set_parameter(self, name: str, value: Any) -> bool:
        """Set a parameter value. Returns success."""
        if name not in self.parameters:
            return False
        self.parameters[name].value = value
        is_valid, _ = self.parameters[name].validate()
        return is_valid

    def channels(self) -> ChannelFlags:
        """Parsed channel selection; RGB for filters without one."""
        param = self.get_parameter("channels")
        if param is None:
            return ChannelFlags.RGB
        return ChannelFlags.parse(param.value)

    def output_dimensions(self, dimensions: Tuple[int, int]) -> Tuple[int, int]:
        """Size of this filter's output for an input of the given size."""
        return dimensions


def _channels_parameter(default: str = "RGB") -> FilterParameter:
    return FilterParameter(
        name="Channels",
        param_type=ParameterType.CHANNELS,
        value=default,
        description="Channels to write, any of R, G, B, A (e.g. RGB, RGBA)",
    )


def _radius_parameter(default: int, max_val: int = 64) -> FilterParameter:
    return FilterParameter(
        name="Radius",
        param_type=ParameterType.INT,
        value=default,
        min_val=0,
        max_val=max_val,
        description="Window radius in pixels (0 = identity)",
    )


# ============================================================================
# FILTER IMPLEMENTATIONS
# ============================================================================

class GrayscaleFilter(ProcessingFilter):
    """Luma-weighted grayscale."""

    def __init__(self):
        super().__init__(
            filter_id="grayscale",
            name="Grayscale",
            category="Color",
            parameters={"channels": _channels_parameter()},
        )


class SepiaFilter(ProcessingFilter):
    """Sepia tone."""

    def __init__(self):
        super().__init__(
            filter_id="sepia",
            name="Sepia",
            category="Color",
            parameters={"channels": _channels_parameter()},
        )


class NegativeFilter(ProcessingFilter):
    """Invert channel values (255 - value)."""

    def __init__(self):
        super().__init__(
            filter_id="negative",
            name="Negative",
            category="Color",
            parameters={"channels": _channels_parameter()},
        )


class GammaCorrectionFilter(ProcessingFilter):
    """Apply gamma correction."""

    def __init__(self):
        super().__init__(
            filter_id="gamma_correction",
            name="Gamma Correction",
            category="Color",
            parameters={
                "gamma": FilterParameter(
                    name="Gamma",
                    param_type=ParameterType.FLOAT,
                    value=1.0,
                    min_val=0.0,
                    min_exclusive=True,
                    description="Gamma (1.0 = no change, >1 brightens, <1 darkens)"
                ),
                "channels": _channels_parameter(),
            }
        )


class MeanBlurFilter(ProcessingFilter):
    """Box blur."""

    def __init__(self):
        super().__init__(
            filter_id="mean_blur",
            name="Mean Blur",
            category="Blur",
            parameters={
                "radius": _radius_parameter(DEFAULT_BLUR_RADIUS),
                "channels": _channels_parameter(),
            }
        )


class GaussianBlurFilter(ProcessingFilter):
    """Gaussian blur."""

    def __init__(self):
        super().__init__(
            filter_id="gaussian_blur",
            name="Gaussian Blur",
            category="Blur",
            parameters={
                "radius": _radius_parameter(DEFAULT_BLUR_RADIUS),
                "sigma": FilterParameter(
                    name="Sigma",
                    param_type=ParameterType.FLOAT,
                    value=DEFAULT_GAUSSIAN_SIGMA,
                    min_val=0.0,
                    min_exclusive=True,
                    description="Standard deviation of the gaussian"
                ),
                "channels": _channels_parameter(),
            }
        )


class KuwaharaFilter(ProcessingFilter):
    """Edge-preserving Kuwahara smoothing."""

    def __init__(self):
        super().__init__(
            filter_id="kuwahara",
            name="Kuwahara",
            category="Blur",
            parameters={
                "radius": _radius_parameter(DEFAULT_KUWAHARA_RADIUS),
                "channels": _channels_parameter(),
            }
        )


class CannyFilter(ProcessingFilter):
    """Canny edge detection."""

    def __init__(self):
        super().__init__(
            filter_id="canny",
            name="Canny Edge Detection",
            category="Detection",
            parameters={
                "radius": _radius_parameter(DEFAULT_CANNY_RADIUS),
                "sigma": FilterParameter(
                    name="Sigma",
                    param_type=ParameterType.FLOAT,
                    value=DEFAULT_CANNY_SIGMA,
                    min_val=0.0,
                    min_exclusive=True,
                    description="Smoothing standard deviation"
                ),
                "low_threshold": FilterParameter(
                    name="Low Threshold",
                    param_type=ParameterType.FLOAT,
                    value=DEFAULT_LOW_THRESHOLD,
                    min_val=0.0,
                    description="Weak edge magnitude"
                ),
                "high_threshold": FilterParameter(
                    name="High Threshold",
                    param_type=ParameterType.FLOAT,
                    value=DEFAULT_HIGH_THRESHOLD,
                    min_val=0.0,
                    description="Strong edge magnitude"
                ),
            }
        )

    def validate_parameters(self) -> tuple[bool, List[str]]:
        is_valid, errors = super().validate_parameters()
        if is_valid and self.value("low_threshold") > self.value("high_threshold"):
            errors.append("Low Threshold must not exceed High Threshold")
        return len(errors) == 0, errors


class CropFilter(ProcessingFilter):
    """Copy a rectangular region."""

    def __init__(self):
        super().__init__(
            filter_id="crop",
            name="Crop",
            category="Geometry",
            parameters={
                "width": FilterParameter(
                    name="Width", param_type=ParameterType.INT, value=1, min_val=1,
                    description="Region width in pixels"
                ),
                "height": FilterParameter(
                    name="Height", param_type=ParameterType.INT, value=1, min_val=1,
                    description="Region height in pixels"
                ),
                "offset_x": FilterParameter(
                    name="Offset X", param_type=ParameterType.INT, value=0, min_val=0,
                    description="Left edge of the region"
                ),
                "offset_y": FilterParameter(
                    name="Offset Y", param_type=ParameterType.INT, value=0, min_val=0,
                    description="Top edge of the region"
                ),
            }
        )

    def output_dimensions(self, dimensions: Tuple[int, int]) -> Tuple[int, int]:
        width, height = self.value("width"), self.value("height")
        validate_crop(dimensions, width, height, self.value("offset_x"), self.value("offset_y"))
        return width, height


class ResizeFilter(ProcessingFilter):
    """Nearest-neighbor resize."""

    def __init__(self):
        super().__init__(
            filter_id="resize",
            name="Resize",
            category="Geometry",
            parameters={
                "width": FilterParameter(
                    name="Width", param_type=ParameterType.INT, value=1, min_val=1,
                    description="Target width in pixels"
                ),
                "height": FilterParameter(
                    name="Height", param_type=ParameterType.INT, value=1, min_val=1,
                    description="Target height in pixels"
                ),
            }
        )

    def output_dimensions(self, dimensions: Tuple[int, int]) -> Tuple[int, int]:
        return self.value("width"), self.value("height")


# Registry of all available filters
FILTER_REGISTRY = {
    "grayscale": GrayscaleFilter,
    "sepia": SepiaFilter,
    "negative": NegativeFilter,
    "gamma_correction": GammaCorrectionFilter,
    "mean_blur": MeanBlurFilter,
    "gaussian_blur": GaussianBlurFilter,
    "kuwahara": KuwaharaFilter,
    "canny": CannyFilter,
    "crop": CropFilter,
    "resize": ResizeFilter,
}


def create_filter(filter_id: str) -> Optional[ProcessingFilter]:
    """Create a filter instance by ID. Returns None if filter not found."""
    if filter_id not in FILTER_REGISTRY:
        return None
    return FILTER_REGISTRY[filter_id]()


def get_filters_by_category(category: str) -> List[ProcessingFilter]:
    """Get all filters in a specific category."""
    filters = []
    for filter_class in FILTER_REGISTRY.values():
        f = filter_class()
        if f.category == category:
            filters.append(f)
    return filters


def get_all_categories() -> List[str]:
    """Get all filter categories in order."""
    categories = []
    seen = set()
    for filter_class in FILTER_REGISTRY.values():
        f = filter_class()
        if f.category not in seen:
            categories.append(f.category)
            seen.add(f.category)

    preferred_order = ["Color", "Blur", "Detection", "Geometry"]

    # Return in preferred order, then any others
    result = [cat for cat in preferred_order if cat in categories]
    result.extend(cat for cat in categories if cat not in result)
    return result
