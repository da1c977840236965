import pytest

from query_scanner.config import ScannerConfig
from query_scanner.services.parser import TreeSitterCSharpParser


@pytest.fixture
def parser() -> TreeSitterCSharpParser:
    return TreeSitterCSharpParser()


@pytest.fixture
def config() -> ScannerConfig:
    return ScannerConfig()
