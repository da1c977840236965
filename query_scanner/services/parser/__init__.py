from .interface import SyntaxParserProtocol
from .ts_parser import TreeSitterCSharpParser

__all__ = ["SyntaxParserProtocol", "TreeSitterCSharpParser"]
