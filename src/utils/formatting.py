"""
Formatting utilities for image-sizes output.

Provides the human-readable byte size shown in reports.
"""

from constants import GIB, KIB, MIB


def format_size(size_bytes: int) -> str:
    """
    Format a byte count for display.

    Below 1 MiB the value is shown in whole kibibytes, below 1 GiB in whole
    mebibytes (both truncated), otherwise in gibibytes with two decimals.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string

    Examples:
        >>> format_size(512000)
        '500 KB'
        >>> format_size(3145728)
        '3 MB'
        >>> format_size(1610612736)
        '1.50 GB'
    """
    if size_bytes < MIB:
        return f"{size_bytes // KIB} KB"
    elif size_bytes < GIB:
        return f"{size_bytes // MIB} MB"
    return f"{size_bytes / GIB:.2f} GB"

