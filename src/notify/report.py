# src/notify/report.py — v1
"""Batch report payload and HTML rendering."""

from __future__ import annotations

import html
from importlib import resources
from pathlib import Path
from typing import Any

from ftpbatch.notify.template import populate

SUBJECT_PREFIX = "FTP Automation Batch - "


def load_template(path: Path | None = None) -> str:
    """Read a report template, falling back to the bundled one."""
    if path is not None:
        return Path(path).read_text(encoding="utf-8")
    return (
        resources.files("ftpbatch.notify")
        .joinpath("templates/report.html")
        .read_text(encoding="utf-8")
    )


def file_list_html(filenames: list[str]) -> str:
    """One list item per output file."""
    return "".join(
        f"<li>&#x274f; <small> {html.escape(name)}</small></li>" for name in filenames
    )


def build_report_data(
    batch_name: str,
    production_path: Path,
    page_count: int,
    filenames: list[str],
) -> dict[str, Any]:
    """Build the values substituted into the report template."""
    return {
        "batchName": batch_name,
        "productionPath": str(production_path),
        "pageCount": page_count,
        "fileCount": len(filenames),
        "fileListHtml": file_list_html(filenames),
    }


def render_report(data: dict[str, Any], template: str) -> str:
    return populate(template, data)


def report_subject(batch_name: str) -> str:
    return f"{SUBJECT_PREFIX}{batch_name}"
