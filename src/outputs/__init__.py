"""Report renderers for pod image reports."""

from outputs.base import OutputGenerator
from outputs.json_generator import JSONGenerator
from outputs.table_generator import TableGenerator
from outputs.yaml_generator import YAMLGenerator

_GENERATORS = {
    "table": TableGenerator,
    "json": JSONGenerator,
    "yaml": YAMLGenerator,
}


def get_generator(output_format: str) -> OutputGenerator:
    """
    Create the renderer for a format.

    Args:
        output_format: One of OUTPUT_FORMATS (case-insensitive)

    Returns:
        OutputGenerator instance

    Raises:
        ValidationException: If the format is not supported
    """
    from utils.validation import validate_output_format

    return _GENERATORS[validate_output_format(output_format)]()


__all__ = [
    "OutputGenerator",
    "TableGenerator",
    "JSONGenerator",
    "YAMLGenerator",
    "get_generator",
]
