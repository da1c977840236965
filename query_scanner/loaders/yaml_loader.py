from __future__ import annotations

import logging
from pathlib import Path

import yaml

from query_scanner.models.report import AnalysisReport

logger = logging.getLogger(__name__)


class _LiteralString(str):
    """Marker type to force YAML literal block style (|) for multi-line strings."""


def _literal_str_representer(dumper: yaml.SafeDumper, data: _LiteralString):  # type: ignore[name-defined]
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style="|")


yaml.SafeDumper.add_representer(_LiteralString, _literal_str_representer)  # type: ignore[arg-type]


class YamlLoader:
    """Persist an analysis report as YAML.

    The schema mirrors the JSON loader. Multi-line query texts are emitted
    using YAML literal blocks (|) so the SQL stays readable.
    """

    def __init__(self, output_path: str | Path, indent: int = 2) -> None:
        """Create a YAML loader.

        Args:
            output_path: Target file path to write the report into.
            indent: Indentation level for pretty-printing YAML.
        """
        self.output_path: Path = Path(output_path)
        self.indent: int = indent

    def _to_serializable(self, report: AnalysisReport) -> dict[str, object]:
        payload = report.model_dump(mode="json")
        for file_row in payload["files"]:
            for query in file_row["queries"]:
                text = query["text"]
                if "\n" in text or "\r" in text:
                    query["text"] = _LiteralString(text)
        return payload

    def load(self, report: AnalysisReport) -> None:
        """Write the report to the configured YAML file."""
        if self.output_path.parent and not self.output_path.parent.exists():
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

        payload = self._to_serializable(report)

        try:
            with self.output_path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(
                    payload,
                    f,
                    allow_unicode=True,
                    sort_keys=False,
                    default_flow_style=False,
                    indent=self.indent,
                    width=4096,  # avoid line folding for readability
                )
        except OSError:
            logger.exception("Failed to write report YAML to %s", self.output_path)
            raise
