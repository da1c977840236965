from __future__ import annotations

import json
import logging
from pathlib import Path

from query_scanner.models.report import AnalysisReport

logger = logging.getLogger(__name__)


class JsonLoader:
    """Persist an analysis report as JSON.

    The output is the report model dumped in JSON mode:
    {
      "root": "...",
      "files": [{"file_name": "...", "dependencies": [...], "queries": [...]}],
      "ranking": [{"name": "conn.ExecuteNonQuery", "total": 4, "examples": [...]}]
    }
    """

    def __init__(self, output_path: str | Path, indent: int = 2) -> None:
        """Create a JSON loader.

        Args:
            output_path: Target file path to write the report into.
            indent: Indentation level for pretty-printing JSON.
        """
        self.output_path: Path = Path(output_path)
        self.indent: int = indent

    def load(self, report: AnalysisReport) -> None:
        """Write the report to the configured JSON file."""
        if self.output_path.parent and not self.output_path.parent.exists():
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

        payload = report.model_dump(mode="json")

        try:
            with self.output_path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=self.indent)
        except OSError:
            logger.exception("Failed to write report JSON to %s", self.output_path)
            raise
