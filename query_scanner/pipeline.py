import logging
import os
import threading
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from query_scanner.config import ScannerConfig
from query_scanner.models.finding import FileFindings
from query_scanner.models.report import AnalysisReport, FileReport
from query_scanner.models.source_file import SourceFile
from query_scanner.services.aggregator import CallSiteAggregator
from query_scanner.services.parser import SyntaxParserProtocol, TreeSitterCSharpParser
from query_scanner.services.reporter import FileReporter
from query_scanner.services.scanner import TreeScanner

logger = logging.getLogger(__name__)

FileResult: TypeAlias = tuple[FileFindings, FileReport]


def collect_source_files(
    root: Path, extension: str = ".cs", exclude_dir_names: frozenset[str] = frozenset()
) -> list[Path]:
    """Recursively list files under ``root`` ending with ``extension``.

    Raises:
        ValueError: If ``root`` does not exist or is not a directory.
    """

    if not root.exists():
        raise ValueError(f"Root path does not exist: {root}")
    if not root.is_dir():
        raise ValueError(f"Root path must be a directory: {root}")

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if name not in exclude_dir_names]
        for filename in filenames:
            if not filename.lower().endswith(extension.lower()):
                continue
            candidate = Path(dirpath) / filename
            if candidate.is_file():
                files.append(candidate)

    # Deterministic order for stable reports/tests.
    return sorted(files)


class AnalysisPipeline(BaseModel):
    """Scan every source file under ``root`` and rank call names across them.

    Files may be scanned on a thread pool, but results are merged into the
    aggregator one at a time and in file order, so the report does not depend
    on ``workers``. Setting ``cancel_event`` stops the run between files;
    files already merged stay in the report and no partial file is merged.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path
    config: ScannerConfig = Field(default_factory=ScannerConfig)
    on_error: Literal["raise", "skip"] = "raise"
    cancel_event: threading.Event | None = None
    parser_factory: Callable[[], SyntaxParserProtocol] = TreeSitterCSharpParser

    __local: threading.local = PrivateAttr(default_factory=threading.local)

    def _parser(self) -> SyntaxParserProtocol:
        # tree-sitter parsers are not shared between threads.
        parser = getattr(self.__local, "parser", None)
        if parser is None:
            parser = self.parser_factory()
            self.__local.parser = parser
        return parser

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def analyze_file(self, path: Path) -> FileResult | None:
        """Parse, scan and summarize a single file.

        Returns:
            The file's findings and report, or ``None`` if the run was
            cancelled or the file was skipped after an error.
        """

        if self._cancelled():
            return None

        source_file = SourceFile(path=path)
        try:
            tree = self._parser().parse(source_file.source)
        except OSError:
            if self.on_error == "raise":
                raise
            logger.exception("Failed to read source file: %s", path)
            return None

        findings = TreeScanner(self.config).scan(tree, source_file.name, str(path))
        return findings, FileReporter(self.config).report(findings)

    def _iter_results(self, files: list[Path]) -> Iterator[FileResult | None]:
        if self.config.workers <= 1:
            for path in files:
                yield self.analyze_file(path)
            return

        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            yield from executor.map(self.analyze_file, files)

    def run(self) -> AnalysisReport:
        files = collect_source_files(
            self.root, self.config.file_extension, self.config.exclude_dir_names
        )
        logger.info("Analyzing %d files under %s", len(files), self.root)

        aggregator = CallSiteAggregator()
        file_reports: list[FileReport] = []
        cancelled = False

        for result in self._iter_results(files):
            if self._cancelled():
                cancelled = True
                logger.warning("Analysis cancelled after %d files", len(file_reports))
                break
            if result is None:
                continue
            findings, report = result
            aggregator.merge_findings(findings)
            file_reports.append(report)

        return AnalysisReport(
            root=str(self.root),
            files=file_reports,
            ranking=aggregator.ranking(
                limit=self.config.global_top_calls, examples=self.config.global_examples
            ),
            total_calls=aggregator.total_calls,
            cancelled=cancelled,
        )
