import logging
from dataclasses import dataclass, field

from query_scanner.config import ScannerConfig
from query_scanner.models.call_site import CallSite
from query_scanner.models.finding import (
    COMMAND_TEXT_TAG,
    CONSTRUCTOR_TAG,
    FileFindings,
    FindingKind,
    QueryTextFinding,
)
from query_scanner.models.syntax import (
    Assignment,
    ImportClauseKind,
    ImportStatement,
    Invocation,
    MemberAccess,
    ObjectCreation,
    SyntaxNode,
    SyntaxTree,
)
from query_scanner.services.classifier import QueryCallClassifier
from query_scanner.services.evaluator import evaluate_constant_string

logger = logging.getLogger(__name__)


def canonical_call_name(invocation: Invocation) -> str:
    """Textual identifier of a call: ``receiver.method`` or the raw callee."""

    callee = invocation.callee
    if isinstance(callee, MemberAccess):
        return f"{callee.receiver.text}.{callee.name.text}"
    return callee.text


@dataclass
class _FileScan:
    tree: SyntaxTree
    file_name: str
    file_path: str
    dependencies: set[str] = field(default_factory=set)
    call_sites: list[CallSite] = field(default_factory=list)
    call_texts: list[QueryTextFinding] = field(default_factory=list)
    assignment_texts: list[QueryTextFinding] = field(default_factory=list)
    constructor_texts: list[QueryTextFinding] = field(default_factory=list)

    def line_number(self, node: SyntaxNode) -> int:
        return self.tree.line_of(node.span) + 1

    def findings(self) -> FileFindings:
        return FileFindings(
            file_name=self.file_name,
            file_path=self.file_path,
            dependencies=self.dependencies,
            call_sites=self.call_sites,
            query_texts=[*self.call_texts, *self.assignment_texts, *self.constructor_texts],
        )


class TreeScanner:
    """Walk one file's tree once and collect dependencies, calls and query text.

    Query text findings keep the grouping of the rules that produced them:
    call arguments first, then ``CommandText`` assignments, then command
    constructors, each group in document order.
    """

    def __init__(self, config: ScannerConfig | None = None) -> None:
        config = config or ScannerConfig()
        self.classifier = QueryCallClassifier.from_config(config)
        self.implied_dependency = config.implied_dependency

    def _query_text(
        self, kind: FindingKind, tag: str, node: SyntaxNode, line_number: int
    ) -> QueryTextFinding | None:
        value = evaluate_constant_string(node)
        if not value.strip():
            return None
        return QueryTextFinding(kind=kind, tag=tag, text=value, line_number=line_number)

    def _visit_import(self, scan: _FileScan, node: ImportStatement) -> None:
        for clause in node.clauses:
            if clause.kind == ImportClauseKind.SIMPLE:
                scan.dependencies.add(clause.name)

    def _visit_invocation(self, scan: _FileScan, node: Invocation) -> None:
        name = canonical_call_name(node)
        line_number = scan.line_number(node)
        scan.call_sites.append(
            CallSite(
                name=name,
                file_name=scan.file_name,
                file_path=scan.file_path,
                line_number=line_number,
            )
        )

        if not self.classifier.is_query_execution(name):
            return
        for argument in node.arguments:
            finding = self._query_text(FindingKind.CALL_ARGUMENT, name, argument, line_number)
            if finding is not None:
                scan.call_texts.append(finding)

    def _visit_assignment(self, scan: _FileScan, node: Assignment) -> None:
        if not self.classifier.is_command_text_target(node.left.text):
            return
        finding = self._query_text(
            FindingKind.FIELD_ASSIGNMENT,
            COMMAND_TEXT_TAG,
            node.right,
            scan.line_number(node),
        )
        if finding is not None:
            scan.assignment_texts.append(finding)

    def _visit_object_creation(self, scan: _FileScan, node: ObjectCreation) -> None:
        if not self.classifier.is_command_type(node.type_name):
            return
        scan.dependencies.add(self.implied_dependency)

        if not node.arguments:
            return
        finding = self._query_text(
            FindingKind.CONSTRUCTOR_ARGUMENT,
            CONSTRUCTOR_TAG,
            node.arguments[0],
            scan.line_number(node),
        )
        if finding is not None:
            scan.constructor_texts.append(finding)

    def scan(self, tree: SyntaxTree, file_name: str, file_path: str) -> FileFindings:
        """Collect every finding of one file in a single pre-order pass.

        Args:
            tree: Lowered syntax tree of the file.
            file_name: Display name recorded on each call site.
            file_path: Full path recorded on each call site.

        Returns:
            The file's dependencies, call sites and query text findings.
        """

        scan = _FileScan(tree=tree, file_name=file_name, file_path=file_path)
        for node in tree.walk():
            if isinstance(node, ImportStatement):
                self._visit_import(scan, node)
            elif isinstance(node, Invocation):
                self._visit_invocation(scan, node)
            elif isinstance(node, Assignment):
                self._visit_assignment(scan, node)
            elif isinstance(node, ObjectCreation):
                self._visit_object_creation(scan, node)

        logger.debug(
            "Scanned %s: %d calls, %d dependencies, %d query texts",
            file_path,
            len(scan.call_sites),
            len(scan.dependencies),
            len(scan.call_texts) + len(scan.assignment_texts) + len(scan.constructor_texts),
        )
        return scan.findings()
