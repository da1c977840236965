from pathlib import Path

from query_scanner.config import ScannerConfig
from query_scanner.loaders import JsonLoader, YamlLoader
from query_scanner.models.report import AnalysisReport
from query_scanner.pipeline import AnalysisPipeline

YAML_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml"})


def analyze_directory(root: Path, config: ScannerConfig | None = None) -> AnalysisReport:
    """Analyze every source file below a directory.

    Args:
        root: Directory to scan recursively.
        config: Scanner settings; defaults are used when omitted.

    Returns:
        Per-file reports and the cross-file call ranking.

    Raises:
        ValueError: If root does not exist or is not a directory.
    """
    try:
        resolved_root = root.resolve()
    except (OSError, RuntimeError) as e:
        raise ValueError(f"Invalid path: {root} - {e}") from e

    pipeline = AnalysisPipeline(root=resolved_root, config=config or ScannerConfig())
    return pipeline.run()


def get_loader(output_path: Path) -> JsonLoader | YamlLoader:
    """Pick a report writer from the output file suffix."""
    if output_path.suffix.lower() in YAML_SUFFIXES:
        return YamlLoader(output_path)
    if output_path.suffix.lower() == ".json":
        return JsonLoader(output_path)
    raise ValueError(f"Unsupported report format: {output_path.suffix or output_path.name}")
