# src/batch/verification.py — v1
"""Merge outcome verification.

Every input PDF must have a like-named output PDF that is at least as large
as the input. When a companion TIF was present the output must also differ
in size from the input, otherwise the merge evidently never ran. The size
comparison is a heuristic: a real merge that happens to produce an output
of exactly the input size is reported as a failure.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ftpbatch.core.models import ErrorRecord

logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"
TIF_SUFFIX = ".tif"

MISSING_OUTPUT = "Missing output"
MALFORMED_OUTPUT = "Output is malformed"
EXPECTED_MERGE = "Output === input: expected merge"


def list_pdfs(directory: Path) -> list[Path]:
    """PDF files directly inside ``directory``, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix == PDF_SUFFIX
    )


def companion_tif(pdf: Path) -> Path:
    """The TIF that would be merged into ``pdf``."""
    return pdf.with_suffix(TIF_SUFFIX)


def verify_outputs(input_path: Path, output_path: Path) -> list[ErrorRecord]:
    """Check every input PDF against the output directory.

    At most one size-related error is recorded per file; a missing or
    undersized output skips the expected-merge check for that file. All
    input PDFs are checked regardless of earlier failures.
    """
    outputs = {p.name: p for p in list_pdfs(output_path)}
    errors: list[ErrorRecord] = []

    for pdf in list_pdfs(input_path):
        output = outputs.get(pdf.name)
        if output is None:
            errors.append(ErrorRecord(message=MISSING_OUTPUT, reference=pdf.name))
            continue

        input_size = pdf.stat().st_size
        output_size = output.stat().st_size
        if output_size < input_size:
            errors.append(ErrorRecord(message=MALFORMED_OUTPUT, reference=output.name))
            continue

        if companion_tif(pdf).exists() and output_size == input_size:
            errors.append(ErrorRecord(message=EXPECTED_MERGE, reference=pdf.name))

    logger.debug(
        "Verified %s against %s: %d errors", input_path, output_path, len(errors),
    )
    return errors
