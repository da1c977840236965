from query_scanner.models.syntax import (
    BinaryExpression,
    BinaryOperatorKind,
    StringLiteral,
    SyntaxNode,
)


def evaluate_constant_string(node: SyntaxNode) -> str:
    """Resolve ``node`` to the constant string it provably denotes.

    String literals resolve to their value and concatenations to the
    concatenation of both sides. Anything else resolves to ``""``, which
    callers treat as absent. A concatenation with one unresolvable side
    keeps only the resolvable part: ``"SELECT " + x`` gives ``"SELECT "``.

    Args:
        node: Any expression node.

    Returns:
        The resolved text, or an empty string.
    """

    # Long builders are left-nested; walk the left spine instead of recursing.
    right_operands: list[SyntaxNode] = []
    while isinstance(node, BinaryExpression) and node.operator == BinaryOperatorKind.CONCATENATE:
        right_operands.append(node.right)
        node = node.left

    head = node.value if isinstance(node, StringLiteral) else ""
    return head + "".join(
        evaluate_constant_string(operand) for operand in reversed(right_operands)
    )
