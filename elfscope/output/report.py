"""
ElfScope Report Generator
==========================

Writes image reports as a single JSON document for machine consumption.

Document layout::

    {
      "report_type": "elfscope_image_report",
      "version": "1.0.0",
      "generated_at": "...",
      "summary": {"images": 2, "decoded": 1, "failed": 1},
      "images": [ { ...ImageReport... }, ... ]
    }

Byte fields (magic, padding, note descriptors) are rendered as hex.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from elfscope import __version__
from elfscope.core.models import ImageReport


class ElfReportGenerator:
    """Build and persist JSON reports."""

    def build(self, reports: Sequence[ImageReport]) -> dict[str, Any]:
        """Return the report document for *reports* as plain data."""
        decoded = sum(1 for report in reports if report.ok)
        return {
            "report_type": "elfscope_image_report",
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "summary": {
                "images": len(reports),
                "decoded": decoded,
                "failed": len(reports) - decoded,
            },
            "images": [report.model_dump(mode="json") for report in reports],
        }

    def render_json(self, reports: Sequence[ImageReport]) -> str:
        return json.dumps(self.build(reports), indent=2, ensure_ascii=False)

    def generate_json(self, reports: Sequence[ImageReport], output_path: str | Path) -> str:
        """Write the JSON report for *reports* to *output_path*.

        Returns:
            The absolute path of the generated report.
        """
        path = Path(output_path).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_json(reports), encoding="utf-8")
        return str(path)
