from typing import Protocol, runtime_checkable

from query_scanner.models.syntax import SyntaxTree


@runtime_checkable
class SyntaxParserProtocol(Protocol):
    """Protocol defining the interface for source parsers."""

    def parse(self, source: bytes) -> SyntaxTree:
        """Parse source bytes into the scanner's node taxonomy.

        Args:
            source: Raw bytes of one source file.

        Returns:
            The lowered tree together with its span-to-line mapping.
        """
        ...
