from enum import StrEnum


class LoweredNodeTypes(StrEnum):
    USING_DIRECTIVE = "using_directive"
    INVOCATION_EXPRESSION = "invocation_expression"
    MEMBER_ACCESS_EXPRESSION = "member_access_expression"
    ASSIGNMENT_EXPRESSION = "assignment_expression"
    OBJECT_CREATION_EXPRESSION = "object_creation_expression"
    BINARY_EXPRESSION = "binary_expression"
    STRING_LITERAL = "string_literal"
    VERBATIM_STRING_LITERAL = "verbatim_string_literal"
    RAW_STRING_LITERAL = "raw_string_literal"


CONCATENATION_OPERATOR: str = "+"
IMPORT_NAME_TYPES: set[str] = {
    "identifier",
    "qualified_name",
    "generic_name",
    "alias_qualified_name",
}
# Tokens that make a using directive something other than a plain namespace import.
NON_SIMPLE_IMPORT_MARKERS: set[str] = {"static", "=", "name_equals"}
STRING_ENCODING_SUFFIXES: tuple[str, ...] = ("u8", "U8")
STRING_LITERAL_TYPES: set[str] = {
    LoweredNodeTypes.STRING_LITERAL.value,
    LoweredNodeTypes.VERBATIM_STRING_LITERAL.value,
    LoweredNodeTypes.RAW_STRING_LITERAL.value,
}
# Simple escape sequences of regular C# string literals.
SIMPLE_ESCAPES: dict[str, str] = {
    "'": "'",
    '"': '"',
    "\\": "\\",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
