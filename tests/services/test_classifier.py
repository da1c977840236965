import pytest

from query_scanner.config import ScannerConfig
from query_scanner.services.classifier import QueryCallClassifier


@pytest.fixture
def classifier(config: ScannerConfig) -> QueryCallClassifier:
    return QueryCallClassifier.from_config(config)


@pytest.mark.parametrize(
    "name",
    [
        "db.ExecuteReader",
        "cmd.ExecuteNonQuery",
        "cmd.ExecuteScalar",
        "Collection.Execute",
        "repo.ExecuteQuery",
        "ExecuteOrder66",
    ],
)
def test_is_query_execution__on_execute_fragment__returns_true(
    classifier: QueryCallClassifier, name: str
) -> None:
    assert classifier.is_query_execution(name)


@pytest.mark.parametrize("name", ["db.Open", "Console.WriteLine", "db.executeReader", "Exec"])
def test_is_query_execution__without_fragment__returns_false(
    classifier: QueryCallClassifier, name: str
) -> None:
    assert not classifier.is_query_execution(name)


def test_is_command_text_target__on_member_access__matches_substring(
    classifier: QueryCallClassifier,
) -> None:
    assert classifier.is_command_text_target("cmd.CommandText")
    assert classifier.is_command_text_target("this.command.CommandTextOverride")
    assert not classifier.is_command_text_target("cmd.commandtext")


def test_is_command_type__on_known_command_types__returns_true(
    classifier: QueryCallClassifier,
) -> None:
    assert classifier.is_command_type("SqlCommand")
    assert classifier.is_command_type("System.Data.OleDb.OleDbCommand")
    assert classifier.is_command_type("SqlCommandBuilder")
    assert not classifier.is_command_type("SqlConnection")


def test_from_config__with_custom_fragments__uses_them() -> None:
    classifier = QueryCallClassifier.from_config(
        ScannerConfig(execution_fragments=("Query",))
    )

    assert classifier.is_query_execution("conn.QueryAsync")
    assert not classifier.is_query_execution("conn.ExecuteReader")
