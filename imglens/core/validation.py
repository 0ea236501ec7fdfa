"""
Validation engine for filter pipelines.

Structured validation rules that must pass before any materialization.
Returns ValidationIssue list; ERROR severity blocks processing.
"""

from typing import List, Optional, Tuple

from .errors import InvalidParameterError
from .types import ValidationIssue, ValidationSeverity


class ValidationEngine:
    """Validates pipelines against an input image geometry."""

    @staticmethod
    def validate_pipeline(
        pipeline,
        dimensions: Optional[Tuple[int, int]] = None,
    ) -> List[ValidationIssue]:
        """
        Validate a processing pipeline.

        Args:
            pipeline: ProcessingPipeline to check
            dimensions: (width, height) of the input image, if known. Enables
                geometry checks (crop bounds) that depend on the input size.

        Returns:
            List of ValidationIssue; processing is blocked if any ERROR present.
        """
        issues = []

        filters = pipeline.get_enabled_filters()

        # 1. Something to do
        if not filters:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EMPTY_PIPELINE",
                    message="Pipeline has no enabled filters; output equals input.",
                    context={},
                )
            )
            return issues

        # 2. Parameter ranges
        issues.extend(ValidationEngine._validate_parameters(filters))
        if any(i.severity == ValidationSeverity.ERROR for i in issues):
            return issues

        # 3. Geometry, propagated through every stage
        if dimensions is not None:
            issues.extend(ValidationEngine._validate_geometry(filters, dimensions))

        return issues

    @staticmethod
    def _validate_parameters(filters) -> List[ValidationIssue]:
        issues = []
        for index, f in enumerate(filters):
            is_valid, errors = f.validate_parameters()
            if is_valid:
                continue
            for error in errors:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="INVALID_PARAMETER",
                        message=f"Filter {index} ({f.name}): {error}",
                        context={"filter_id": f.filter_id, "index": index},
                    )
                )
        return issues

    @staticmethod
    def _validate_geometry(filters, dimensions: Tuple[int, int]) -> List[ValidationIssue]:
        issues = []
        for index, f in enumerate(filters):
            try:
                dimensions = f.output_dimensions(dimensions)
            except InvalidParameterError as e:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="INVALID_GEOMETRY",
                        message=f"Filter {index} ({f.name}): {e}",
                        context={
                            "filter_id": f.filter_id,
                            "index": index,
                            "input_dimensions": dimensions,
                        },
                    )
                )
                # Later stages have no known input size
                break
        return issues

    @staticmethod
    def raise_for_errors(issues: List[ValidationIssue]) -> None:
        """Raise InvalidParameterError if any issue has ERROR severity."""
        errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
        if errors:
            message = "; ".join(i.message for i in errors)
            raise InvalidParameterError(message, issues=errors)
