"""
Plain-text table renderer.

One block per pod: a heading line, a column header, then one row per
container. Column widths are shared by every block so the report reads
as a single table.
"""

from typing import Sequence

from constants import DIGEST_UNAVAILABLE
from core.models import ImageRecord, PodReport
from outputs.base import OutputGenerator

COLUMNS = ("CONTAINER NAME", "IMAGE URI", "TAG", "SHA DIGEST", "SIZE")
COLUMN_GAP = "  "


def _row(image: ImageRecord) -> tuple[str, ...]:
    return (
        image.container_name,
        image.repository,
        image.tag,
        image.digest or DIGEST_UNAVAILABLE,
        image.size_formatted,
    )


class TableGenerator(OutputGenerator):
    """Renders reports as aligned text columns."""

    def supports_format(self) -> str:
        return "table"

    def render(self, reports: Sequence[PodReport]) -> str:
        rows = [_row(image) for report in reports for image in report.images]
        widths = [len(heading) for heading in COLUMNS]
        for row in rows:
            widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

        def format_line(cells: Sequence[str]) -> str:
            padded = [cell.ljust(width) for cell, width in zip(cells, widths)]
            return COLUMN_GAP.join(padded).rstrip()

        lines = []
        for report in reports:
            lines.append(f"Pod: {report.pod_name} (Namespace: {report.namespace})")
            lines.append(format_line(COLUMNS))
            for image in report.images:
                lines.append(format_line(_row(image)))
            lines.append("")

        return "\n".join(lines)


__all__ = ["TableGenerator"]
