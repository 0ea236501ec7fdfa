"""
Processing pipeline management.

Manages a chain of filters that are applied in order. Every filter is a
stage barrier: its output image is the next filter's input.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple

from ..core import InvalidParameterError, ValidationEngine, ValidationIssue
from .filters import ProcessingFilter, create_filter


@dataclass
class ProcessingPipeline:
    """Container for a sequence of processing filters."""

    filters: List[ProcessingFilter] = field(default_factory=list)
    enabled: bool = True

    def add_filter(self, filter: ProcessingFilter) -> None:
        """Add a filter to the pipeline."""
        filter.order = len(self.filters)
        self.filters.append(filter)

    def remove_filter(self, index: int) -> bool:
        """Remove a filter by index. Returns success."""
        if 0 <= index < len(self.filters):
            del self.filters[index]
            self._renumber()
            return True
        return False

    def move_filter(self, from_index: int, to_index: int) -> bool:
        """Move a filter from one position to another. Returns success."""
        if not (0 <= from_index < len(self.filters) and 0 <= to_index < len(self.filters)):
            return False

        filter = self.filters.pop(from_index)
        self.filters.insert(to_index, filter)
        self._renumber()
        return True

    def get_filter(self, index: int) -> Optional[ProcessingFilter]:
        """Get a filter by index."""
        if 0 <= index < len(self.filters):
            return self.filters[index]
        return None

    def validate(self, dimensions: Optional[Tuple[int, int]] = None) -> List[ValidationIssue]:
        """
        Check every enabled filter, and the geometry through all stages when
        the input (width, height) is known.
        """
        return ValidationEngine.validate_pipeline(self, dimensions)

    def clear(self) -> None:
        """Remove all filters from pipeline."""
        self.filters.clear()

    def is_empty(self) -> bool:
        return len(self.filters) == 0

    def get_enabled_filters(self) -> List[ProcessingFilter]:
        """Get list of enabled filters in order."""
        if not self.enabled:
            return []
        return [f for f in self.filters if f.enabled]

    def _renumber(self) -> None:
        for i, f in enumerate(self.filters):
            f.order = i

    def __len__(self) -> int:
        return len(self.filters)

    def __iter__(self):
        return iter(self.filters)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize pipeline to dictionary."""
        return {
            "enabled": self.enabled,
            "filters": [self._serialize_filter(f) for f in self.filters],
        }

    @staticmethod
    def _serialize_filter(filter: ProcessingFilter) -> Dict[str, Any]:
        """Serialize a single filter."""
        params = {name: param.value for name, param in filter.parameters.items()}
        return {
            "filter_id": filter.filter_id,
            "name": filter.name,
            "enabled": filter.enabled,
            "parameters": params,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ProcessingPipeline":
        """
        Deserialize pipeline from dictionary.

        Raises:
            InvalidParameterError: on malformed entries or an unknown filter id
                or parameter name
        """
        if not isinstance(data, dict):
            raise InvalidParameterError("pipeline must be an object")
        filters = data.get("filters", [])
        if not isinstance(filters, list):
            raise InvalidParameterError("'filters' must be a list")

        pipeline = ProcessingPipeline()
        pipeline.enabled = data.get("enabled", True)

        for index, filter_data in enumerate(filters):
            pipeline.add_filter(ProcessingPipeline._deserialize_filter(filter_data, index))

        return pipeline

    @staticmethod
    def _deserialize_filter(data: Dict[str, Any], index: int) -> ProcessingFilter:
        """Deserialize a single filter from data."""
        if not isinstance(data, dict):
            raise InvalidParameterError(f"Filter {index} must be an object, got {data!r}")

        filter_id = data.get("filter_id")
        if not isinstance(filter_id, str) or not filter_id:
            raise InvalidParameterError(f"Filter {index} has no filter_id")

        # Create a fresh filter instance
        filter_obj = create_filter(filter_id)
        if filter_obj is None:
            raise InvalidParameterError(f"Filter {index}: unknown filter id '{filter_id}'")

        parameters = data.get("parameters", {})
        if not isinstance(parameters, dict):
            raise InvalidParameterError(f"Filter {index} ({filter_id}): 'parameters' must be an object")

        # Restore parameter values
        for param_name, value in parameters.items():
            param = filter_obj.get_parameter(param_name)
            if param is None:
                raise InvalidParameterError(
                    f"Filter {index} ({filter_id}): unknown parameter '{param_name}'"
                )
            param.value = value

        filter_obj.enabled = data.get("enabled", True)
        return filter_obj
