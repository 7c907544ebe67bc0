"""YAML renderer: the same pod dictionaries as the JSON renderer."""

from typing import Sequence

import yaml

from core.exceptions import OutputException
from core.models import PodReport
from outputs.base import OutputGenerator


class YAMLGenerator(OutputGenerator):
    """Renders reports as a YAML sequence, keys in declaration order."""

    def supports_format(self) -> str:
        return "yaml"

    def render(self, reports: Sequence[PodReport]) -> str:
        try:
            return yaml.safe_dump(
                [report.to_dict() for report in reports],
                sort_keys=False,
                default_flow_style=False,
            )
        except yaml.YAMLError as e:
            raise OutputException("yaml", str(e)) from e


__all__ = ["YAMLGenerator"]
