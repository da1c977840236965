from pydantic import BaseModel, ConfigDict

from query_scanner.config import ScannerConfig


class QueryCallClassifier(BaseModel):
    """Name-based heuristics deciding which shapes may carry query text.

    Every check is a case-sensitive substring test on source text. The
    policy errs towards false positives: ``ExecuteOrder66`` counts as an
    execution call because it contains ``Execute``.
    """

    model_config = ConfigDict(frozen=True)

    execution_fragments: tuple[str, ...]
    command_text_marker: str
    command_type_markers: tuple[str, ...]

    @classmethod
    def from_config(cls, config: ScannerConfig) -> "QueryCallClassifier":
        return cls(
            execution_fragments=config.execution_fragments,
            command_text_marker=config.command_text_marker,
            command_type_markers=config.command_type_markers,
        )

    def is_query_execution(self, name: str) -> bool:
        return any(fragment in name for fragment in self.execution_fragments)

    def is_command_text_target(self, text: str) -> bool:
        return self.command_text_marker in text

    def is_command_type(self, type_name: str) -> bool:
        return any(marker in type_name for marker in self.command_type_markers)
