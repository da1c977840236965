from query_scanner.config import ScannerConfig
from query_scanner.models.finding import (
    COMMAND_TEXT_TAG,
    CONSTRUCTOR_TAG,
    FindingKind,
    QueryTextFinding,
)
from query_scanner.services.reporter import FileReporter
from query_scanner.services.scanner import TreeScanner

from tests.consts import ORDER_REPOSITORY_FILE
from tests.utils import METHOD_BODY_FIRST_LINE, in_method, parse_source, scan_source


def test_scan__on_order_repository__collects_all_findings() -> None:
    tree = parse_source(ORDER_REPOSITORY_FILE.read_text(encoding="utf-8"))

    findings = TreeScanner().scan(tree, ORDER_REPOSITORY_FILE.name, str(ORDER_REPOSITORY_FILE))

    assert findings.dependencies == {"System", "System.Data", "System.Data.SqlClient"}
    assert [(call.name, call.line_number) for call in findings.call_sites] == [
        ("conn.ExecuteNonQuery", 16),
        ("conn.ExecuteNonQuery", 17),
        ("conn.ExecuteNonQuery", 18),
        ("BuildSql", 18),
        ("Console.WriteLine", 19),
    ]
    assert all(call.file_name == "OrderRepository.cs" for call in findings.call_sites)
    assert all(call.file_path == str(ORDER_REPOSITORY_FILE) for call in findings.call_sites)
    assert findings.query_texts == [
        QueryTextFinding(
            kind=FindingKind.CALL_ARGUMENT,
            tag="conn.ExecuteNonQuery",
            text="DELETE FROM Orders",
            line_number=16,
        ),
        QueryTextFinding(
            kind=FindingKind.CALL_ARGUMENT,
            tag="conn.ExecuteNonQuery",
            text="sp_PurgeOrders()",
            line_number=17,
        ),
        QueryTextFinding(
            kind=FindingKind.FIELD_ASSIGNMENT,
            tag=COMMAND_TEXT_TAG,
            text="UPDATE Orders SET Total = 0",
            line_number=15,
        ),
        QueryTextFinding(
            kind=FindingKind.CONSTRUCTOR_ARGUMENT,
            tag=CONSTRUCTOR_TAG,
            text="INSERT INTO Orders (Id) VALUES (@id)",
            line_number=14,
        ),
    ]


def test_scan__on_call_shapes__derives_canonical_names() -> None:
    findings = scan_source(
        in_method(
            "        db.Open();\n"
            "        Helpers.Format(x);\n"
            "        Run();\n"
            "        a.b.C();\n"
            "        outer.Wrap(inner.Build());"
        )
    )

    assert [call.name for call in findings.call_sites] == [
        "db.Open",
        "Helpers.Format",
        "Run",
        "a.b.C",
        "outer.Wrap",
        "inner.Build",
    ]


def test_scan__on_aliased_receivers__keeps_names_distinct() -> None:
    findings = scan_source(
        in_method(
            "        conn.ExecuteReader();\n"
            "        var c = conn;\n"
            "        c.ExecuteReader();"
        )
    )

    assert [call.name for call in findings.call_sites] == ["conn.ExecuteReader", "c.ExecuteReader"]


def test_scan__on_execution_call__flags_every_constant_argument() -> None:
    findings = scan_source(in_method('        db.Execute("SELECT 1", timeout, "SELECT 2");'))

    assert [(finding.text, finding.tag) for finding in findings.query_texts] == [
        ("SELECT 1", "db.Execute"),
        ("SELECT 2", "db.Execute"),
    ]
    assert {finding.line_number for finding in findings.query_texts} == {METHOD_BODY_FIRST_LINE}


def test_scan__on_permissive_match__flags_execute_lookalike() -> None:
    findings = scan_source(in_method('        orders.ExecuteOrder66("SELECT 1");'))

    assert [finding.tag for finding in findings.query_texts] == ["orders.ExecuteOrder66"]


def test_scan__on_non_execution_call__ignores_string_arguments() -> None:
    findings = scan_source(in_method('        log.Write("SELECT 1");'))

    assert findings.query_texts == []
    assert [call.name for call in findings.call_sites] == ["log.Write"]


def test_scan__on_unresolvable_or_blank_text__creates_no_finding() -> None:
    findings = scan_source(
        in_method(
            '        db.ExecuteScalar("   ");\n'
            "        db.ExecuteScalar(sql);\n"
            '        db.ExecuteScalar($"SELECT {id}");\n'
            '        cmd.CommandText = BuildSql();'
        )
    )

    assert findings.query_texts == []
    assert len(findings.call_sites) == 4


def test_scan__on_partial_concatenation__keeps_literal_part() -> None:
    findings = scan_source(in_method('        db.ExecuteReader("SELECT * FROM " + table);'))

    assert [finding.text for finding in findings.query_texts] == ["SELECT * FROM "]


def test_scan__on_command_constructors__adds_implied_dependency() -> None:
    findings = scan_source(
        in_method(
            "        var a = new OleDbCommand(sql, conn);\n"
            "        var b = new SqlCommand();\n"
            '        var c = new SqlConnection("Server=.");'
        )
    )

    assert findings.dependencies == {"System.Data.SqlClient"}
    assert findings.query_texts == []


def test_scan__on_constructor__evaluates_only_first_argument() -> None:
    findings = scan_source(in_method('        var cmd = new SqlCommand(sql, "SELECT 1");'))

    assert findings.query_texts == []


def test_scan__on_object_initializer__reads_command_text_assignment() -> None:
    findings = scan_source(
        in_method('        var cmd = new SqlCommand { CommandText = "SELECT 1" };')
    )

    assert findings.dependencies == {"System.Data.SqlClient"}
    assert [(finding.kind, finding.text) for finding in findings.query_texts] == [
        (FindingKind.FIELD_ASSIGNMENT, "SELECT 1")
    ]


def test_scan__on_single_line__applies_rules_independently() -> None:
    findings = scan_source(
        in_method('        db.Execute("SELECT 1"); cmd.CommandText = "SELECT 2";')
    )

    assert [(finding.kind, finding.line_number) for finding in findings.query_texts] == [
        (FindingKind.CALL_ARGUMENT, METHOD_BODY_FIRST_LINE),
        (FindingKind.FIELD_ASSIGNMENT, METHOD_BODY_FIRST_LINE),
    ]


def test_scan__with_custom_config__uses_configured_markers() -> None:
    config = ScannerConfig(
        execution_fragments=("Query",),
        command_type_markers=("NpgsqlCommand",),
        implied_dependency="Npgsql",
    )
    tree = parse_source(
        in_method(
            '        conn.Query("SELECT 1");\n'
            '        var cmd = new NpgsqlCommand("SELECT 2");\n'
            '        conn.Execute("SELECT 3");'
        )
    )

    findings = TreeScanner(config).scan(tree, "Pg.cs", "/src/Pg.cs")

    assert findings.dependencies == {"Npgsql"}
    assert [finding.text for finding in findings.query_texts] == ["SELECT 1", "SELECT 2"]


def test_scan__on_long_literal_concatenation__resolves_whole_text() -> None:
    parts = [f"L{i} " for i in range(2000)]
    argument = " + ".join(f'"{part}"' for part in parts)

    findings = scan_source(in_method(f"        db.ExecuteReader({argument});"))

    assert [finding.text for finding in findings.query_texts] == ["".join(parts)]
    assert findings.query_texts[0].line_number == METHOD_BODY_FIRST_LINE


def test_scan__on_multiline_raw_string__reports_stored_procedure() -> None:
    findings = scan_source(
        in_method(
            '        var cmd = new SqlCommand("""\n'
            "            sp_GetUser 1\n"
            '            """, conn);'
        )
    )

    [query] = FileReporter().report(findings).queries

    assert query.text == "sp_GetUser 1"
    assert query.stored_procedure == "sp_GetUser"
    assert query.line_number == METHOD_BODY_FIRST_LINE
