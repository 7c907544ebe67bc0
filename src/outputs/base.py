"""
Base output generator interface.

Defines the contract that all report renderers must implement.
"""

from abc import ABC, abstractmethod
from typing import Sequence, TextIO

from core.models import PodReport


class OutputGenerator(ABC):
    """
    Abstract base class for report renderers.

    All renderers (table, JSON, YAML) must implement this interface.
    """

    @abstractmethod
    def render(self, reports: Sequence[PodReport]) -> str:
        """
        Render pod reports.

        Args:
            reports: Pod reports in display order

        Returns:
            Rendered report text
        """
        pass

    @abstractmethod
    def supports_format(self) -> str:
        """
        Return the format this generator supports.

        Returns:
            Format identifier (e.g., "table", "json")
        """
        pass

    def generate(self, reports: Sequence[PodReport], stream: TextIO) -> None:
        """
        Render reports and write them to a stream.

        Args:
            reports: Pod reports in display order
            stream: Destination (usually stdout)
        """
        text = self.render(reports)
        stream.write(text)
        if text and not text.endswith("\n"):
            stream.write("\n")
