import pytest
from pydantic import ValidationError

from query_scanner.config import ScannerConfig


def test_scanner_config__reads_environment_when_created(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("QUERY_SCANNER_EXTENSION", ".csx")
    monkeypatch.setenv("QUERY_SCANNER_WORKERS", "3")

    config = ScannerConfig()

    assert config.file_extension == ".csx"
    assert config.workers == 3


def test_scanner_config__without_environment__uses_defaults(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("QUERY_SCANNER_EXTENSION", raising=False)
    monkeypatch.delenv("QUERY_SCANNER_WORKERS", raising=False)

    config = ScannerConfig()

    assert config.file_extension == ".cs"
    assert config.workers == 1
    assert config.exclude_dir_names == frozenset()


def test_scanner_config__on_invalid_workers_variable__raises_validation_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("QUERY_SCANNER_WORKERS", "many")

    with pytest.raises(ValidationError):
        ScannerConfig()
    assert ScannerConfig(workers=2).workers == 2
