#!/usr/bin/env python3
"""
Relationship Report Generator
Collects per-flag dependency relationships into a report object,
then formats it as HTML, Markdown or JSON.
"""

import html
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .exceptions import NothingToReportError, ReportWriteError
from .models import Dependency, FlagDefinition
from .stats import DependencyStats


@dataclass(frozen=True)
class FlagRelationship:
    """What one flag depends on and what depends on it."""
    name: str
    flag_id: Optional[str]
    has_metadata: bool
    depends_on: List[str] = field(default_factory=list)
    depended_by: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReportSummary:
    total_flags: int
    total_dependencies: int


@dataclass(frozen=True)
class RelationshipReport:
    summary: ReportSummary
    entries: List[FlagRelationship]  # first-seen order
    generated_at: str

    def sorted_entries(self) -> List[FlagRelationship]:
        return sorted(self.entries, key=lambda entry: entry.name)


def _append_unique(values: List[str], value: str):
    if value not in values:
        values.append(value)


def build_relationship_report(edges: Sequence[Dependency],
                              flags: Sequence[FlagDefinition],
                              generated_at: Optional[datetime] = None) -> RelationshipReport:
    """Group edges into per-flag relationships.

    Every name that appears in an edge gets an entry, whether or not the
    export carries a definition for it. Neighbour lists are de-duplicated
    but keep the order in which they were first seen.
    """
    if not edges:
        raise NothingToReportError("No dependencies found between flags")

    flag_map = {flag.name: flag for flag in flags}

    depends_on: Dict[str, List[str]] = {}
    depended_by: Dict[str, List[str]] = {}
    for edge in edges:
        for name in (edge.dependent, edge.dependency):
            depends_on.setdefault(name, [])
            depended_by.setdefault(name, [])
        _append_unique(depends_on[edge.dependent], edge.dependency)
        _append_unique(depended_by[edge.dependency], edge.dependent)

    entries = []
    for name in depends_on:
        flag = flag_map.get(name)
        entries.append(FlagRelationship(
            name=name,
            flag_id=flag.id if flag else None,
            has_metadata=flag is not None,
            depends_on=list(depends_on[name]),
            depended_by=list(depended_by[name]),
        ))

    generated_at = generated_at or datetime.now()
    return RelationshipReport(
        summary=ReportSummary(total_flags=len(entries), total_dependencies=len(edges)),
        entries=entries,
        generated_at=generated_at.strftime('%Y-%m-%d %H:%M:%S'),
    )


HTML_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; line-height: 1.6; }
    h1, h2, h3 { color: #333; }
    .card { border: 1px solid #ddd; border-radius: 4px; padding: 15px; margin-bottom: 15px; }
    .flag-name { font-weight: bold; color: #0066cc; }
    .depends-on { color: #cc0000; }
    .depended-by { color: #009900; }
    .no-metadata { color: #999; font-style: italic; }
    .table { border-collapse: collapse; width: 100%; margin-top: 20px; }
    .table th, .table td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    .table th { background-color: #f2f2f2; }
    .table tr:nth-child(even) { background-color: #f9f9f9; }
"""


def _html_list(names: List[str], css_class: str, empty_text: str) -> str:
    if not names:
        return f"<p>{empty_text}</p>"
    items = "".join(f'<li class="{css_class}">{html.escape(n)}</li>' for n in names)
    return f"<ul>{items}</ul>"


def render_html(report: RelationshipReport) -> str:
    """Format the report as a self-contained HTML page."""
    e = html.escape
    out = []

    out.append("<!DOCTYPE html>")
    out.append('<html lang="en">')
    out.append("<head>")
    out.append('  <meta charset="UTF-8">')
    out.append('  <meta name="viewport" content="width=device-width, initial-scale=1.0">')
    out.append("  <title>Feature Flag Dependencies</title>")
    out.append(f"  <style>{HTML_STYLE}  </style>")
    out.append("</head>")
    out.append("<body>")
    out.append("  <h1>Feature Flag Dependencies Report</h1>")
    out.append(f"  <p>Generated on {e(report.generated_at)}</p>")

    # Summary
    out.append("  <h2>Summary</h2>")
    out.append('  <div class="card">')
    out.append(f"    <p>Total flags with dependencies: {report.summary.total_flags}</p>")
    out.append(f"    <p>Total dependencies: {report.summary.total_dependencies}</p>")
    out.append("  </div>")

    # Table
    out.append("  <h2>Flag Dependency Table</h2>")
    out.append('  <table class="table">')
    out.append("    <tr><th>Flag Name</th><th>Depends On</th><th>Depended By</th></tr>")
    for entry in report.entries:
        depends = e(", ".join(entry.depends_on)) if entry.depends_on else "-"
        dependents = e(", ".join(entry.depended_by)) if entry.depended_by else "-"
        out.append(
            f'    <tr><td class="flag-name">{e(entry.name)}</td>'
            f"<td>{depends}</td><td>{dependents}</td></tr>"
        )
    out.append("  </table>")

    # Detail cards
    out.append("  <h2>Detailed Flag Information</h2>")
    for entry in report.sorted_entries():
        out.append('  <div class="card">')
        out.append(f'    <h3 class="flag-name">{e(entry.name)}</h3>')
        if entry.has_metadata:
            out.append(f"    <p>ID: {e(entry.flag_id or '-')}</p>")
        else:
            out.append('    <p class="no-metadata">No metadata</p>')
        out.append("    <h4>Dependencies:</h4>")
        out.append("    " + _html_list(entry.depends_on, "depends-on", "No dependencies"))
        out.append("    <h4>Depended by:</h4>")
        out.append("    " + _html_list(entry.depended_by, "depended-by",
                                       "No other flags depend on this flag"))
        out.append("  </div>")

    out.append("</body>")
    out.append("</html>")
    return "\n".join(out) + "\n"


MARKDOWN_SPECIAL = re.compile(r"([\\`*_\[\]<>|#])")


def _md_escape(text: str) -> str:
    return MARKDOWN_SPECIAL.sub(r"\\\1", text)


def render_markdown(report: RelationshipReport) -> str:
    """Format the report as a Markdown document."""
    md = []

    md.append("# Feature Flag Dependencies Report")
    md.append("")
    md.append(f"**Generated on:** {report.generated_at}")
    md.append("")
    md.append("---")
    md.append("")

    md.append("## Summary")
    md.append("")
    md.append(f"- **Total flags with dependencies:** {report.summary.total_flags}")
    md.append(f"- **Total dependencies:** {report.summary.total_dependencies}")
    md.append("")

    md.append("## Flag Dependency Table")
    md.append("")
    md.append("| Flag Name | Depends On | Depended By |")
    md.append("|-----------|------------|-------------|")
    for entry in report.entries:
        depends = ", ".join(_md_escape(n) for n in entry.depends_on) or "-"
        dependents = ", ".join(_md_escape(n) for n in entry.depended_by) or "-"
        md.append(f"| **{_md_escape(entry.name)}** | {depends} | {dependents} |")
    md.append("")

    md.append("## Detailed Flag Information")
    md.append("")
    for entry in report.sorted_entries():
        md.append(f"### {_md_escape(entry.name)}")
        md.append("")
        if entry.has_metadata:
            md.append(f"**ID:** {_md_escape(entry.flag_id or '-')}")
        else:
            md.append("_No metadata_")
        md.append("")
        md.append("**Dependencies:**")
        md.append("")
        if entry.depends_on:
            md.extend(f"- {_md_escape(name)}" for name in entry.depends_on)
        else:
            md.append("No dependencies")
        md.append("")
        md.append("**Depended by:**")
        md.append("")
        if entry.depended_by:
            md.extend(f"- {_md_escape(name)}" for name in entry.depended_by)
        else:
            md.append("No other flags depend on this flag")
        md.append("")

    return "\n".join(md)


def export_json(report: RelationshipReport, stats: DependencyStats) -> dict:
    """Machine-readable dump of the report together with degree statistics."""
    return {
        'generated_at': report.generated_at,
        'summary': asdict(report.summary),
        'statistics': {
            'total_flags_involved': stats.total_flags_involved,
            'total_edges': stats.total_edges,
            'in_degree': dict(stats.in_degree),
            'out_degree': dict(stats.out_degree),
            'top_in_degree': [{'flag': name, 'count': count} for name, count in stats.top_in_degree],
            'top_out_degree': [{'flag': name, 'count': count} for name, count in stats.top_out_degree],
        },
        'flags': [asdict(entry) for entry in report.sorted_entries()],
    }


def write_report(text: str, output_file: Union[str, Path]) -> Path:
    """Write a rendered document, creating parent directories as needed."""
    output_file = Path(output_file)
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(text)
    except OSError as e:
        raise ReportWriteError(f"Could not write report to {output_file}", cause=e) from e
    return output_file
