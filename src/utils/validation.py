"""
Input validation utilities for image-sizes.

Provides validation functions for command-line options and configuration
values.
"""

from typing import Optional

from constants import INSPECTOR_BACKENDS, OUTPUT_FORMATS
from core.exceptions import ValidationException


def validate_positive_number(
    value: float,
    field_name: str,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
) -> float:
    """
    Validate numeric value is within acceptable range.

    Args:
        value: Value to validate
        field_name: Field name for error messages
        min_value: Minimum acceptable value
        max_value: Maximum acceptable value (optional)

    Returns:
        Validated value

    Raises:
        ValidationException: If value is out of range
    """
    if value < min_value:
        raise ValidationException(
            f"Value must be >= {min_value}, got {value}",
            field_name
        )

    if max_value is not None and value > max_value:
        raise ValidationException(
            f"Value must be <= {max_value}, got {value}",
            field_name
        )

    return value


def validate_output_format(output_format: str) -> str:
    """
    Validate and normalize report format.

    Args:
        output_format: Requested format

    Returns:
        Lower-cased format name

    Raises:
        ValidationException: If the format is not supported
    """
    normalized = (output_format or "").strip().lower()
    if normalized not in OUTPUT_FORMATS:
        raise ValidationException(
            f"Unsupported format {output_format!r} (valid: {', '.join(OUTPUT_FORMATS)})",
            "output"
        )
    return normalized


def validate_inspector_backend(backend: str) -> str:
    """
    Validate manifest inspector backend name.

    Raises:
        ValidationException: If the backend is unknown
    """
    if backend not in INSPECTOR_BACKENDS:
        raise ValidationException(
            f"Unknown inspector {backend!r} (valid: {', '.join(INSPECTOR_BACKENDS)})",
            "inspector"
        )
    return backend


__all__ = [
    "validate_positive_number",
    "validate_output_format",
    "validate_inspector_backend",
]
