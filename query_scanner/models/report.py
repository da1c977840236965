from pydantic import BaseModel, Field

from query_scanner.models.call_site import CallSite
from query_scanner.models.finding import FindingKind


class CallGroup(BaseModel):
    name: str
    count: int = Field(..., ge=1)


class FlaggedQuery(BaseModel):
    """A query text finding prepared for display."""

    line_number: int = Field(..., ge=1)
    kind: FindingKind
    tag: str
    text: str
    preview: str = Field(..., description="Text cut to the preview length")
    truncated: bool = False
    contains_exec: bool = Field(
        default=False, description="True if the text mentions EXEC or EXECUTE"
    )
    stored_procedure: str | None = Field(
        default=None, description="Procedure name if the text starts with sp_"
    )


class FileReport(BaseModel):
    file_name: str
    file_path: str
    dependencies: list[str] = Field(default_factory=list)
    call_count: int = Field(default=0, ge=0)
    top_calls: list[CallGroup] = Field(default_factory=list)
    queries: list[FlaggedQuery] = Field(default_factory=list)


class RankedCall(BaseModel):
    """One entry of the cross-file call ranking."""

    name: str
    total: int = Field(..., ge=1)
    examples: list[CallSite] = Field(default_factory=list)
    remaining: int = Field(default=0, ge=0)


class AnalysisReport(BaseModel):
    root: str
    files: list[FileReport] = Field(default_factory=list)
    ranking: list[RankedCall] = Field(default_factory=list)
    total_calls: int = Field(default=0, ge=0)
    cancelled: bool = False
