"""Closed node taxonomy consumed by the tree scanner.

Parser adapters lower their concrete syntax trees into these variants. Every
node keeps its byte span and the verbatim source text it covers; anything the
scanner has no rule for is an ``OpaqueNode`` that only carries children.
"""

from bisect import bisect_right
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum


class ImportClauseKind(StrEnum):
    SIMPLE = "simple"
    OTHER = "other"


class BinaryOperatorKind(StrEnum):
    CONCATENATE = "concatenate"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Span:
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    span: Span
    text: str

    def children(self) -> Iterator["SyntaxNode"]:
        return iter(())


@dataclass(frozen=True, slots=True)
class OpaqueNode(SyntaxNode):
    kind: str = ""
    nodes: tuple[SyntaxNode, ...] = ()

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.nodes)


@dataclass(frozen=True, slots=True)
class ImportClause:
    kind: ImportClauseKind
    name: str = ""


@dataclass(frozen=True, slots=True)
class ImportStatement(SyntaxNode):
    clauses: tuple[ImportClause, ...] = ()


@dataclass(frozen=True, slots=True)
class StringLiteral(SyntaxNode):
    value: str = ""


@dataclass(frozen=True, slots=True)
class BinaryExpression(SyntaxNode):
    operator: BinaryOperatorKind
    left: SyntaxNode
    right: SyntaxNode

    def children(self) -> Iterator[SyntaxNode]:
        yield self.left
        yield self.right


@dataclass(frozen=True, slots=True)
class MemberAccess(SyntaxNode):
    receiver: SyntaxNode
    name: SyntaxNode

    def children(self) -> Iterator[SyntaxNode]:
        yield self.receiver
        yield self.name


@dataclass(frozen=True, slots=True)
class Invocation(SyntaxNode):
    callee: SyntaxNode
    arguments: tuple[SyntaxNode, ...] = ()

    def children(self) -> Iterator[SyntaxNode]:
        yield self.callee
        yield from self.arguments


@dataclass(frozen=True, slots=True)
class Assignment(SyntaxNode):
    left: SyntaxNode
    right: SyntaxNode

    def children(self) -> Iterator[SyntaxNode]:
        yield self.left
        yield self.right


@dataclass(frozen=True, slots=True)
class ObjectCreation(SyntaxNode):
    """``new T(args) { initializer }``.

    ``arguments`` is ``None`` when the source has no argument list at all,
    which is different from an empty ``()``.
    """

    type_name: str
    arguments: tuple[SyntaxNode, ...] | None = None
    initializer: SyntaxNode | None = None

    def children(self) -> Iterator[SyntaxNode]:
        if self.arguments:
            yield from self.arguments
        if self.initializer is not None:
            yield self.initializer


@dataclass(frozen=True)
class SyntaxTree:
    """A lowered tree plus the span-to-line mapping of its source."""

    root: SyntaxNode
    line_starts: tuple[int, ...] = field(default=(0,))

    @classmethod
    def from_source(cls, root: SyntaxNode, source: bytes) -> "SyntaxTree":
        starts: list[int] = [0]
        starts.extend(i + 1 for i, byte in enumerate(source) if byte == 0x0A)
        return cls(root=root, line_starts=tuple(starts))

    def line_of(self, span: Span) -> int:
        """Return the 0-based line on which ``span`` starts."""

        return bisect_right(self.line_starts, span.start) - 1

    def walk(self) -> Iterator[SyntaxNode]:
        """Yield every node in pre-order, document order."""

        stack: list[SyntaxNode] = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(tuple(node.children())))
