"""
Profile report for an inferred TableState.

Builds the versioned JSON payload the CLI prints or writes, plus a short
plain-text rendering of it.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any

from sheet_typer import __version__ as TOOL_VERSION
from sheet_typer.contracts import build_contract, build_run_summary
from sheet_typer.engine import TableState
from sheet_typer.inference import profile_column
from sheet_typer.loader import LoadedRows

TOOL_NAME = "sheet-typer"


def analyse_columns(state: TableState) -> list[dict[str, Any]]:
    rows = state.data_rows
    if rows is None or state.columns is None:
        return []
    columns = []
    for index, column in enumerate(state.columns):
        profile = profile_column([row[index] for row in rows])
        # The state's datatype is authoritative; the profile adds the evidence.
        profile.pop("datatype")
        columns.append({"index": index, **column.to_dict(), **profile})
    return columns


def build_profile_report(
    state: TableState,
    loaded: LoadedRows | None = None,
    input_path: Path | None = None,
) -> dict[str, Any]:
    columns = analyse_columns(state)
    status = "ok" if state.columns is not None else "rejected"
    detected = Counter(column["datatype"] for column in columns)
    data_rows = state.data_rows or ()
    warnings = list(loaded.warnings) if loaded else []

    contract = build_contract("sheet_typer.profile")
    report = {
        "contract": contract,
        "schema_version": contract["version"],
        "tool_version": TOOL_VERSION,
        "file": input_path.name if input_path else None,
        "encoding": loaded.encoding if loaded else None,
        "delimiter": loaded.delimiter if loaded else None,
        "status": status,
        "header_included": state.header_included,
        "row_errors": [error.to_dict() for error in loaded.errors] if loaded else [],
        "columns": columns,
        "summary": {
            "total_rows": len(state.dataset) if state.dataset is not None else 0,
            "data_rows": len(data_rows),
            "total_columns": len(columns),
            "detected_types": dict(sorted(detected.items())),
        },
    }
    report["run_summary"] = build_run_summary(
        tool=TOOL_NAME,
        input_path=input_path,
        status=status,
        metrics={
            "data_rows": len(data_rows),
            "columns": len(columns),
            "row_errors": len(report["row_errors"]),
        },
        warnings=warnings,
    )
    return report


def render_profile_text(report: dict[str, Any]) -> str:
    summary = report.get("summary", {})
    lines = [
        "sheet-typer profile",
        f"File: {report.get('file') or '[unknown]'}",
        f"Encoding: {report.get('encoding') or '[unknown]'}",
        f"Delimiter: {report.get('delimiter')!r}",
        f"Status: {report.get('status', '[unknown]')}",
        f"Header row: {'yes' if report.get('header_included') else 'no'}",
        f"Data rows: {summary.get('data_rows', 0)}",
    ]
    if report.get("row_errors"):
        lines.append("Row errors:")
        lines.extend(f"- line {item['line']}: {item['code']} ({item['message']})" for item in report["row_errors"])
    if report.get("columns"):
        lines.append("Columns:")
        for column in report["columns"]:
            line = f"- {column['index'] + 1}. {column['name'] or '[blank]'}: {column['datatype']}"
            if column.get("min_value") is not None:
                line += f" (range {column['min_value']:g} .. {column['max_value']:g})"
            lines.append(line)
    return "\n".join(lines) + "\n"
