from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from query_scanner.models.call_site import CallSite


class FindingKind(StrEnum):
    """Source shapes that can carry embedded query text."""

    CALL_ARGUMENT = "explicit-call-argument"
    FIELD_ASSIGNMENT = "field-assignment"
    CONSTRUCTOR_ARGUMENT = "constructor-argument"


COMMAND_TEXT_TAG = "CommandText"
CONSTRUCTOR_TAG = "SqlCommand Constructor"


class QueryTextFinding(BaseModel):
    """A constant string that was resolved at a query-shaped location."""

    model_config = ConfigDict(frozen=True)

    kind: FindingKind = Field(..., description="Which extraction rule produced the text")
    tag: str = Field(..., description="Call name for call arguments, fixed tag otherwise")
    text: str = Field(..., description="Resolved constant text, possibly multi-line")
    line_number: int = Field(..., ge=1, description="Line where the source shape starts")


class FileFindings(BaseModel):
    """Everything the tree scanner extracted from a single file."""

    file_name: str
    file_path: str
    dependencies: set[str] = Field(default_factory=set)
    call_sites: list[CallSite] = Field(default_factory=list)
    query_texts: list[QueryTextFinding] = Field(default_factory=list)
