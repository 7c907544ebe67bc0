"""Core logic for image reference parsing, resolution and pod reporting."""

from core.models import (
    ImageReference,
    ImageRecord,
    PodReport,
    PodSpec,
    ScanResult,
)
from core.reference import parse_image_reference
from core.resolver import ImageResolver
from core.aggregator import ReportAggregator
from core.cache import ResolutionCache

__all__ = [
    "ImageReference",
    "ImageRecord",
    "PodReport",
    "PodSpec",
    "ScanResult",
    "parse_image_reference",
    "ImageResolver",
    "ReportAggregator",
    "ResolutionCache",
]
