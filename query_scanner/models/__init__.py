from .call_site import CallSite
from .finding import (
    COMMAND_TEXT_TAG,
    CONSTRUCTOR_TAG,
    FileFindings,
    FindingKind,
    QueryTextFinding,
)
from .report import AnalysisReport, CallGroup, FileReport, FlaggedQuery, RankedCall
from .source_file import SourceFile

__all__ = [
    "COMMAND_TEXT_TAG",
    "CONSTRUCTOR_TAG",
    "AnalysisReport",
    "CallGroup",
    "CallSite",
    "FileFindings",
    "FileReport",
    "FindingKind",
    "FlaggedQuery",
    "QueryTextFinding",
    "RankedCall",
    "SourceFile",
]
