"""Table, JSON and YAML rendering for command output."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import yaml
from pydantic import BaseModel

from crossplane_ai.config import OutputFormat


def truncate(text: str, width: int) -> str:
    """Truncate text to width, adding ellipsis if needed."""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def format_table(
    headers: list[str],
    rows: list[list[str]],
    alignments: list[str] | None = None,
) -> str:
    """Render a fixed-width table with ASCII borders.

    Args:
        headers: Column header strings.
        rows: List of row data (each row is a list of strings).
        alignments: Per-column alignment ('l' or 'r'). Defaults to left.
    """
    if not headers:
        return ""

    num_cols = len(headers)
    if alignments is None:
        alignments = ["l"] * num_cols

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[:num_cols]):
            col_widths[i] = max(col_widths[i], len(cell))

    def _line(cells: Sequence[str]) -> str:
        padded = []
        for i in range(num_cols):
            cell = cells[i] if i < len(cells) else ""
            padded.append(cell.rjust(col_widths[i]) if alignments[i] == "r" else cell.ljust(col_widths[i]))
        return "| " + " | ".join(padded) + " |"

    border = "+-" + "-+-".join("-" * w for w in col_widths) + "-+"
    lines = [border, _line(headers), border]
    lines.extend(_line(row) for row in rows)
    lines.append(border)
    return "\n".join(lines)


def to_plain(data: Any) -> Any:
    """Convert models (and lists of them) into JSON-compatible data."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [to_plain(item) for item in data]
    if isinstance(data, dict):
        return {key: to_plain(value) for key, value in data.items()}
    return data


def render_structured(data: Any, fmt: OutputFormat) -> str:
    """Render data as JSON or YAML."""
    plain = to_plain(data)
    if fmt == OutputFormat.YAML:
        return yaml.safe_dump(plain, sort_keys=False, default_flow_style=False).rstrip("\n")
    return json.dumps(plain, indent=2)


def render_records(records: Sequence[Any], fmt: OutputFormat = OutputFormat.TABLE) -> str:
    """Render ResourceRecords (or analysis rows)."""
    if fmt != OutputFormat.TABLE:
        return render_structured(list(records), fmt)
    if not records:
        return "No resources found."
    rows = [
        [truncate(r.name, 48), r.kind, r.status.value, r.provider, r.age or "-"]
        for r in records
    ]
    return format_table(["NAME", "KIND", "STATUS", "PROVIDER", "AGE"], rows)


def render_analysis(result: Any, fmt: OutputFormat = OutputFormat.TABLE, summary_only: bool = False) -> str:
    """Render an AnalysisResult."""
    if fmt != OutputFormat.TABLE:
        data = to_plain(result)
        if summary_only:
            data.pop("resources", None)
        return render_structured(data, fmt)

    lines = [
        "Crossplane Resource Analysis",
        "",
        f"Total resources:   {result.total_count}",
        f"Healthy resources: {result.healthy_count}",
        f"Issues found:      {result.issue_count}",
        f"Health score:      {result.health_score}%",
    ]
    if result.summary:
        lines += ["", result.summary]

    if not summary_only and result.resources:
        lines += ["", render_records(result.resources)]

    if result.issues:
        lines += ["", "Issues:"]
        for issue in result.issues:
            lines.append(f"  [{issue.severity.value}] {issue.description}")
            if issue.resolution:
                lines.append(f"      Resolution: {issue.resolution}")

    if result.recommendations:
        lines += ["", "Recommendations:"]
        for i, rec in enumerate(result.recommendations, start=1):
            lines.append(f"  {i}. {rec.title} (Priority: {rec.priority.value})")
            if not summary_only:
                lines.append(f"     {rec.description}")
                if rec.impact:
                    lines.append(f"     Impact: {rec.impact}")

    return "\n".join(lines)


def render_suggestions(
    suggestions: Sequence[Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    detailed: bool = False,
) -> str:
    """Render Suggestions as a numbered list, or JSON/YAML."""
    if fmt != OutputFormat.TABLE:
        return render_structured(list(suggestions), fmt)
    if not suggestions:
        return "No suggestions."

    lines = ["Suggestions:", ""]
    for i, suggestion in enumerate(suggestions, start=1):
        lines.append(f"{i}. {suggestion.title}")
        lines.append(f"   {suggestion.description}")
        lines.append(f"   Priority: {suggestion.priority.value}")
        if detailed:
            lines.append(f"   Category: {suggestion.category}")
            if suggestion.example:
                lines.append("   Example:")
                lines.extend(f"     {line}" for line in suggestion.example.splitlines())
        lines.append("")
    return "\n".join(lines).rstrip("\n")
