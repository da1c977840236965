"""Tree-sitter C# adapter.

String literals are lowered to the value the literal denotes at runtime:
escape sequences of regular literals are decoded, ``""`` in verbatim
literals becomes ``"`` and multi-line raw literals lose their opening and
closing lines and the indentation of the closing delimiter.
"""

import logging
import re
import sys

import tree_sitter_c_sharp as tscsharp
from pydantic import BaseModel
from tree_sitter import Language, Node as TSNode, Parser

from query_scanner.models.syntax import (
    Assignment,
    BinaryExpression,
    BinaryOperatorKind,
    ImportClause,
    ImportClauseKind,
    ImportStatement,
    Invocation,
    MemberAccess,
    ObjectCreation,
    OpaqueNode,
    Span,
    StringLiteral,
    SyntaxNode,
    SyntaxTree,
)
from query_scanner.services.parser.consts import (
    CONCATENATION_OPERATOR,
    IMPORT_NAME_TYPES,
    NON_SIMPLE_IMPORT_MARKERS,
    SIMPLE_ESCAPES,
    STRING_ENCODING_SUFFIXES,
    STRING_LITERAL_TYPES,
    LoweredNodeTypes,
)

logger = logging.getLogger(__name__)

ESCAPE_PATTERN = re.compile(
    r"\\(x[0-9A-Fa-f]{1,4}|u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|.)", re.DOTALL
)


def _decode_escape(match: re.Match[str]) -> str:
    escape = match.group(1)
    if escape[0] in "xuU" and len(escape) > 1:
        code_point = int(escape[1:], 16)
        if code_point <= sys.maxunicode:
            return chr(code_point)
    # Unknown escapes do not compile; keep them as written.
    return SIMPLE_ESCAPES.get(escape, match.group(0))


def decode_escapes(text: str) -> str:
    return ESCAPE_PATTERN.sub(_decode_escape, text)


def raw_string_value(text: str) -> str:
    """Content of a raw string literal.

    Single-line raw literals keep everything between the quote runs. For
    multi-line ones the first and last lines are dropped and the whitespace
    in front of the closing quotes is removed from every content line.
    """

    quotes = len(text) - len(text.lstrip('"'))
    body = text[quotes:-quotes]
    if "\n" not in body:
        return body

    lines = [line.removesuffix("\r") for line in body.split("\n")]
    indentation = lines[-1]
    return "\n".join(
        line.removeprefix(indentation) if line.strip() else "" for line in lines[1:-1]
    )


class NodeLowerer(BaseModel):
    """Translate a tree-sitter C# tree into the scanner's node taxonomy."""

    source: bytes

    def __get_snippet(self, node: TSNode) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def __span(self, node: TSNode) -> Span:
        return Span(node.start_byte, node.end_byte)

    def __opaque(self, node: TSNode) -> OpaqueNode:
        return OpaqueNode(
            span=self.__span(node),
            text=self.__get_snippet(node),
            kind=node.type,
            nodes=tuple(self.lower(child) for child in node.named_children),
        )

    def __string_value(self, node: TSNode) -> str:
        text = self.__get_snippet(node)
        for suffix in STRING_ENCODING_SUFFIXES:
            text = text.removesuffix(suffix)

        if node.type == LoweredNodeTypes.VERBATIM_STRING_LITERAL:
            return text[2:-1].replace('""', '"')
        if node.type == LoweredNodeTypes.RAW_STRING_LITERAL:
            return raw_string_value(text)
        return decode_escapes(text[1:-1])

    def __lower_using(self, node: TSNode) -> ImportStatement:
        child_types = {child.type for child in node.children}
        names = [child for child in node.named_children if child.type in IMPORT_NAME_TYPES]

        if child_types & NON_SIMPLE_IMPORT_MARKERS or not names:
            clause = ImportClause(kind=ImportClauseKind.OTHER)
        else:
            clause = ImportClause(kind=ImportClauseKind.SIMPLE, name=self.__get_snippet(names[-1]))

        return ImportStatement(
            span=self.__span(node), text=self.__get_snippet(node), clauses=(clause,)
        )

    def __lower_arguments(self, argument_list: TSNode | None) -> tuple[SyntaxNode, ...]:
        if argument_list is None:
            return ()

        arguments: list[SyntaxNode] = []
        for argument in argument_list.named_children:
            if argument.type != "argument":
                continue
            # argument := [name_colon] [ref|out|in] expression
            expressions = [child for child in argument.named_children if child.type != "comment"]
            if expressions:
                arguments.append(self.lower(expressions[-1]))
        return tuple(arguments)

    def __lower_invocation(self, node: TSNode) -> SyntaxNode:
        callee = node.child_by_field_name("function")
        if callee is None:
            return self.__opaque(node)
        return Invocation(
            span=self.__span(node),
            text=self.__get_snippet(node),
            callee=self.lower(callee),
            arguments=self.__lower_arguments(node.child_by_field_name("arguments")),
        )

    def __lower_member_access(self, node: TSNode) -> SyntaxNode:
        receiver = node.child_by_field_name("expression")
        name = node.child_by_field_name("name")
        if receiver is None or name is None:
            return self.__opaque(node)
        return MemberAccess(
            span=self.__span(node),
            text=self.__get_snippet(node),
            receiver=self.lower(receiver),
            name=self.lower(name),
        )

    def __lower_assignment(self, node: TSNode) -> SyntaxNode:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            return self.__opaque(node)
        return Assignment(
            span=self.__span(node),
            text=self.__get_snippet(node),
            left=self.lower(left),
            right=self.lower(right),
        )

    def __lower_object_creation(self, node: TSNode) -> SyntaxNode:
        type_node = node.child_by_field_name("type")
        if type_node is None:
            return self.__opaque(node)

        argument_list = node.child_by_field_name("arguments")
        initializer = node.child_by_field_name("initializer")
        return ObjectCreation(
            span=self.__span(node),
            text=self.__get_snippet(node),
            type_name=self.__get_snippet(type_node),
            arguments=None if argument_list is None else self.__lower_arguments(argument_list),
            initializer=None if initializer is None else self.lower(initializer),
        )

    def __binary_operands(self, node: TSNode) -> tuple[TSNode, TSNode] | None:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            return None
        return left, right

    def __lower_binary(self, node: TSNode) -> SyntaxNode:
        """Lower a left-associative operator chain without recursing per operand."""

        if self.__binary_operands(node) is None:
            return self.__opaque(node)

        # a + b + c parses as ((a + b) + c); collect the chain down its left spine.
        chain: list[TSNode] = []
        current = node
        while (
            current.type == LoweredNodeTypes.BINARY_EXPRESSION
            and self.__binary_operands(current) is not None
        ):
            chain.append(current)
            current = current.child_by_field_name("left")

        lowered = self.lower(current)
        for binary in reversed(chain):
            operator = binary.child_by_field_name("operator")
            is_concatenation = operator is not None and operator.type == CONCATENATION_OPERATOR
            lowered = BinaryExpression(
                span=self.__span(binary),
                text=self.__get_snippet(binary),
                operator=(
                    BinaryOperatorKind.CONCATENATE
                    if is_concatenation
                    else BinaryOperatorKind.OTHER
                ),
                left=lowered,
                right=self.lower(binary.child_by_field_name("right")),
            )
        return lowered

    def lower(self, node: TSNode) -> SyntaxNode:
        if node.type == LoweredNodeTypes.USING_DIRECTIVE:
            return self.__lower_using(node)
        if node.type == LoweredNodeTypes.INVOCATION_EXPRESSION:
            return self.__lower_invocation(node)
        if node.type == LoweredNodeTypes.MEMBER_ACCESS_EXPRESSION:
            return self.__lower_member_access(node)
        if node.type == LoweredNodeTypes.ASSIGNMENT_EXPRESSION:
            return self.__lower_assignment(node)
        if node.type == LoweredNodeTypes.OBJECT_CREATION_EXPRESSION:
            return self.__lower_object_creation(node)
        if node.type == LoweredNodeTypes.BINARY_EXPRESSION:
            return self.__lower_binary(node)
        if node.type in STRING_LITERAL_TYPES:
            return StringLiteral(
                span=self.__span(node),
                text=self.__get_snippet(node),
                value=self.__string_value(node),
            )
        return self.__opaque(node)


class TreeSitterCSharpParser:
    """Source parser backed by py-tree-sitter and the C# grammar."""

    def __init__(self) -> None:
        self.language = Language(tscsharp.language())
        self.parser = Parser(self.language)

    def parse(self, source: bytes) -> SyntaxTree:
        tree = self.parser.parse(source)
        if tree.root_node.has_error:
            logger.debug("tree-sitter reported syntax errors; scanning the recovered tree")
        root = NodeLowerer(source=source).lower(tree.root_node)
        return SyntaxTree.from_source(root, source)
