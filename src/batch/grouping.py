# src/batch/grouping.py — v1
"""Grouping engine — partition a remote folder listing into batches.

Files are ordered by modification time and split wherever two
chronologically adjacent files are further apart than the gap threshold.
The comparison is always against the immediately preceding file, so a
steady trickle of uploads with short gaps stays in one batch even when the
batch as a whole spans much longer than the threshold.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

from ftpbatch.core.models import RemoteFileDescriptor

logger = logging.getLogger(__name__)

GAP_THRESHOLD = timedelta(minutes=5)


def group_files(
    files: Sequence[RemoteFileDescriptor],
    gap: timedelta = GAP_THRESHOLD,
) -> list[list[RemoteFileDescriptor]]:
    """Sort files by modification time and split them into batches.

    Args:
        files: Remote listing, in any order. Not modified.
        gap: A new batch starts when the next file is newer than the
            current one by strictly more than this.

    Returns:
        Batches in chronological order; each batch is non-empty and keeps
        chronological order. Empty input gives an empty list.
    """
    # sorted() is stable: equal timestamps keep their listing order
    ordered = sorted(files, key=lambda f: f.modify_time)

    batches: list[list[RemoteFileDescriptor]] = []
    current: list[RemoteFileDescriptor] = []

    for i, file in enumerate(ordered):
        current.append(file)
        if i + 1 == len(ordered):
            batches.append(current)
            break
        if ordered[i + 1].modify_time - file.modify_time > gap:
            batches.append(current)
            current = []

    logger.debug(
        "Grouped %d files into %d batches (gap=%ss)",
        len(ordered), len(batches), gap.total_seconds(),
    )
    return batches
