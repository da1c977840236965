import codecs
from pathlib import Path

from pydantic import BaseModel, PrivateAttr


class SourceFile(BaseModel):
    """Represents a source file in the scanned corpus."""

    path: Path
    __source: bytes | None = PrivateAttr(default=None)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def source(self) -> bytes:
        """Raw file bytes without a UTF-8 byte-order mark."""
        if self.__source is None:
            self.__source = self.path.read_bytes().removeprefix(codecs.BOM_UTF8)
        return self.__source
