import re
from collections import Counter

from query_scanner.config import ScannerConfig
from query_scanner.models.finding import FileFindings, QueryTextFinding
from query_scanner.models.report import CallGroup, FileReport, FlaggedQuery

TRUNCATION_MARKER = "..."
_EXEC_PATTERN = re.compile(r"EXEC|EXECUTE", re.IGNORECASE)
_STORED_PROCEDURE_PREFIX = "sp_"
_PROCEDURE_NAME_END = re.compile(r"[ (]")


def preview_text(text: str, length: int = 100) -> tuple[str, bool]:
    """Cut ``text`` to ``length`` characters, appending a marker when cut."""

    if len(text) > length:
        return text[:length] + TRUNCATION_MARKER, True
    return text, False


def contains_exec(text: str) -> bool:
    return _EXEC_PATTERN.search(text) is not None


def stored_procedure_name(text: str) -> str | None:
    """Return the procedure name if ``text`` starts with ``sp_``.

    The name runs up to the first space or opening parenthesis, so both
    ``sp_GetUser 1`` and ``sp_GetUser(1)`` give ``sp_GetUser``.
    """

    if text[: len(_STORED_PROCEDURE_PREFIX)].lower() != _STORED_PROCEDURE_PREFIX:
        return None
    return _PROCEDURE_NAME_END.split(text, maxsplit=1)[0]


class FileReporter:
    """Summarize the findings of one file for display or serialization."""

    def __init__(self, config: ScannerConfig | None = None) -> None:
        config = config or ScannerConfig()
        self.top_calls = config.file_top_calls
        self.preview_length = config.preview_length

    def _flag(self, finding: QueryTextFinding) -> FlaggedQuery:
        preview, truncated = preview_text(finding.text, self.preview_length)
        return FlaggedQuery(
            line_number=finding.line_number,
            kind=finding.kind,
            tag=finding.tag,
            text=finding.text,
            preview=preview,
            truncated=truncated,
            contains_exec=contains_exec(finding.text),
            stored_procedure=stored_procedure_name(finding.text),
        )

    def report(self, findings: FileFindings) -> FileReport:
        # Counter keeps first-encounter order and sorted() is stable, so ties
        # stay in the order the calls were found.
        counts = Counter(call.name for call in findings.call_sites)
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

        return FileReport(
            file_name=findings.file_name,
            file_path=findings.file_path,
            dependencies=sorted(findings.dependencies),
            call_count=len(findings.call_sites),
            top_calls=[
                CallGroup(name=name, count=count) for name, count in ranked[: self.top_calls]
            ],
            queries=[self._flag(finding) for finding in findings.query_texts],
        )
