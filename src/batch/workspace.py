# src/batch/workspace.py — v1
"""Batch workspace layout and allocation.

Each batch owns an exclusive tree:

    {work_root}/{batch_name}/
        input/    one file per downloaded source file
        output/   merged or copied PDFs
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

INPUT_DIR = "input"
OUTPUT_DIR = "output"


def workspace_dir(work_root: Path, batch_name: str) -> Path:
    """Return the workspace root for a batch."""
    return work_root / batch_name


def input_dir(workspace: Path) -> Path:
    return workspace / INPUT_DIR


def output_dir(workspace: Path) -> Path:
    return workspace / OUTPUT_DIR


def empty_dir(path: Path, keep: Iterable[str] = ()) -> None:
    """Make sure ``path`` is an existing, empty directory.

    Children named in ``keep`` are left alone.
    """
    if path.exists() and not path.is_dir():
        path.unlink()
    path.mkdir(parents=True, exist_ok=True)

    kept = set(keep)
    for child in path.iterdir():
        if child.name in kept:
            continue
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


async def allocate_workspace(workspace: Path) -> Path:
    """Create or reset the batch root and its input/output subareas.

    The three directories are prepared concurrently. Clearing the root
    skips the subarea names so it never races with their own reset.
    Errors such as PermissionError propagate.
    """
    await asyncio.gather(
        asyncio.to_thread(empty_dir, workspace, (INPUT_DIR, OUTPUT_DIR)),
        asyncio.to_thread(empty_dir, input_dir(workspace)),
        asyncio.to_thread(empty_dir, output_dir(workspace)),
    )
    logger.debug("Workspace ready: %s", workspace)
    return workspace
