import os
from typing import Final

from pydantic import BaseModel, Field

DEFAULT_EXECUTION_FRAGMENTS: Final[tuple[str, ...]] = (
    "ExecuteReader",
    "ExecuteNonQuery",
    "ExecuteScalar",
    "Execute",
    "ExecuteQuery",
)


class ScannerConfig(BaseModel):
    """Tunables shared by the scanner, the reporters and the pipeline.

    ``file_extension`` and ``workers`` fall back to the
    ``QUERY_SCANNER_EXTENSION`` and ``QUERY_SCANNER_WORKERS`` environment
    variables, read each time a config is created.
    """

    execution_fragments: tuple[str, ...] = DEFAULT_EXECUTION_FRAGMENTS
    command_text_marker: str = "CommandText"
    command_type_markers: tuple[str, ...] = ("SqlCommand", "OleDbCommand")
    implied_dependency: str = "System.Data.SqlClient"

    file_top_calls: int = Field(default=5, ge=1)
    global_top_calls: int = Field(default=20, ge=1)
    global_examples: int = Field(default=5, ge=0)
    preview_length: int = Field(default=100, ge=1)

    file_extension: str = Field(
        default_factory=lambda: os.getenv("QUERY_SCANNER_EXTENSION", ".cs")
    )
    # Every matching file is scanned unless directories are excluded by name.
    exclude_dir_names: frozenset[str] = frozenset()
    workers: int = Field(
        default_factory=lambda: os.getenv("QUERY_SCANNER_WORKERS", "1"),
        ge=1,
        validate_default=True,
    )
