from query_scanner.models.finding import FileFindings
from query_scanner.models.syntax import SyntaxTree
from query_scanner.services.parser import TreeSitterCSharpParser
from query_scanner.services.scanner import TreeScanner

# Body line 1 of in_method() is line 5 of the generated file.
METHOD_BODY_FIRST_LINE = 5


def in_method(body: str) -> str:
    """Wrap statements in a class and method so they form a valid C# file."""
    return "class C\n{\n    void M()\n    {\n" + body + "\n    }\n}\n"


def parse_source(code: str) -> SyntaxTree:
    return TreeSitterCSharpParser().parse(code.encode("utf-8"))


def scan_source(code: str, file_name: str = "Snippet.cs") -> FileFindings:
    return TreeScanner().scan(parse_source(code), file_name, f"/src/{file_name}")
