"""JSON renderer: a list of pod dictionaries."""

import json
from typing import Sequence

from core.exceptions import OutputException
from core.models import PodReport
from outputs.base import OutputGenerator


class JSONGenerator(OutputGenerator):
    """Renders reports as indented JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def supports_format(self) -> str:
        return "json"

    def render(self, reports: Sequence[PodReport]) -> str:
        try:
            return json.dumps([report.to_dict() for report in reports], indent=self.indent)
        except (TypeError, ValueError) as e:
            raise OutputException("json", str(e)) from e


__all__ = ["JSONGenerator"]
