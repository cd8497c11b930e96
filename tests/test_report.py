"""Tests for the relationship report."""

from datetime import datetime

import pytest

from flag_deps.exceptions import NothingToReportError, ReportWriteError
from flag_deps.models import Dependency, FlagDefinition
from flag_deps.report import (
    build_relationship_report,
    export_json,
    render_html,
    render_markdown,
    write_report,
)
from flag_deps.stats import compute_stats

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5)


def make_report(edges, flags):
    return build_relationship_report(edges, flags, generated_at=FIXED_TIME)


def test_entries_group_edges():
    edges = [Dependency("A", "B"), Dependency("A", "B"), Dependency("C", "B")]
    flags = [FlagDefinition("A", "1"), FlagDefinition("B", "2"), FlagDefinition("C", "3")]
    report = make_report(edges, flags)

    assert report.summary.total_flags == 3
    assert report.summary.total_dependencies == 3
    assert [e.name for e in report.entries] == ["A", "B", "C"]

    by_name = {e.name: e for e in report.entries}
    assert by_name["A"].depends_on == ["B"]
    assert by_name["B"].depended_by == ["A", "C"]
    assert by_name["B"].depends_on == []
    assert by_name["B"].flag_id == "2"


def test_mutual_dependency_entries():
    report = make_report([Dependency("A", "B"), Dependency("B", "A")], [])
    by_name = {e.name: e for e in report.entries}
    assert by_name["A"].depends_on == ["B"]
    assert by_name["A"].depended_by == ["B"]
    assert by_name["B"].depends_on == ["A"]
    assert by_name["B"].depended_by == ["A"]


def test_missing_metadata():
    report = make_report([Dependency("A", "ghost")], [FlagDefinition("A", "1")])
    ghost = next(e for e in report.entries if e.name == "ghost")
    assert not ghost.has_metadata
    assert ghost.flag_id is None
    assert "No metadata" in render_html(report)
    assert "_No metadata_" in render_markdown(report)


def test_sorted_entries():
    report = make_report([Dependency("zeta", "alpha"), Dependency("mid", "alpha")], [])
    assert [e.name for e in report.sorted_entries()] == ["alpha", "mid", "zeta"]


def test_empty_edges_is_nothing_to_report():
    with pytest.raises(NothingToReportError):
        build_relationship_report([], [FlagDefinition("A")])


def test_html_content_and_escaping():
    edges = [Dependency("<script>", "B")]
    report = make_report(edges, [FlagDefinition("<script>", "9"), FlagDefinition("B", "2")])
    page = render_html(report)

    assert "<script>" not in page
    assert "&lt;script&gt;" in page
    assert "Generated on 2024-01-02 03:04:05" in page
    assert "Total dependencies: 1" in page
    assert "No other flags depend on this flag" in page
    assert "No dependencies" in page
    assert "ID: 2" in page


def test_output_is_deterministic():
    edges = [Dependency("A", "B"), Dependency("B", "C")]
    flags = [FlagDefinition("A", "1"), FlagDefinition("B", "2"), FlagDefinition("C", "3")]
    assert render_html(make_report(edges, flags)) == render_html(make_report(edges, flags))
    assert render_markdown(make_report(edges, flags)) == render_markdown(make_report(edges, flags))


def test_markdown_table():
    report = make_report([Dependency("A", "B")], [FlagDefinition("A", "1"), FlagDefinition("B", "2")])
    text = render_markdown(report)
    assert "| **A** | B | - |" in text
    assert "| **B** | - | A |" in text


def test_export_json():
    edges = [Dependency("A", "B"), Dependency("A", "B")]
    report = make_report(edges, [FlagDefinition("A", "1"), FlagDefinition("B", "2")])
    data = export_json(report, compute_stats(edges))

    assert data["summary"] == {"total_flags": 2, "total_dependencies": 2}
    assert data["statistics"]["in_degree"] == {"B": 2}
    assert data["statistics"]["top_out_degree"] == [{"flag": "A", "count": 2}]
    assert [f["name"] for f in data["flags"]] == ["A", "B"]


def test_write_report(tmp_path):
    path = write_report("hello", tmp_path / "nested" / "report.html")
    assert path.read_text(encoding="utf-8") == "hello"


def test_write_report_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(ReportWriteError):
        write_report("hello", blocker / "report.html")


def test_markdown_escapes_table_separators():
    report = make_report([Dependency("a|b", "c_d")], [])
    text = render_markdown(report)
    assert "| **a\\|b** | c\\_d | - |" in text
    assert "### a\\|b" in text
