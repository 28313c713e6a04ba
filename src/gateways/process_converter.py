# src/gateways/process_converter.py — v1
"""Converter that shells out to the external TIF/PDF merge and count executables.

The merge tool is called as ``<merge_command> <pdf> <tif>``. It derives the
output location itself (the batch ``output`` directory beside ``input``).
The count tool is called as ``<count_command> <directory>`` and prints the
total page count on stdout.
"""

from __future__ import annotations

import asyncio
import logging
import re
import shlex
from pathlib import Path

from ftpbatch.gateways.base_converter import BaseConverter, MergeResult

logger = logging.getLogger(__name__)

_COUNT_RE = re.compile(r"(\d+)")


class ProcessConverter(BaseConverter):
    """Run the merge/count tools as child processes."""

    def __init__(self, merge_command: str, count_command: str) -> None:
        """Initialize with the two executables.

        Args:
            merge_command: Merge executable, optionally with leading arguments.
            count_command: Page counter executable, optionally with arguments.
        """
        self._merge_argv = shlex.split(merge_command)
        self._count_argv = shlex.split(count_command)

    async def merge(self, pdf_path: Path, tif_path: Path) -> MergeResult:
        """Run the merge tool; non-zero exit or launch failure is a failed merge."""
        try:
            code, stdout, stderr = await _run(
                [*self._merge_argv, str(pdf_path), str(tif_path)]
            )
        except OSError as exc:
            logger.error("Could not launch merge tool %s: %s", self._merge_argv, exc)
            return MergeResult(success=False, detail=f"launch failed: {exc}")

        if code != 0:
            detail = stderr.strip() or stdout.strip() or f"exit code {code}"
            return MergeResult(success=False, detail=detail)

        output = pdf_path.parent.parent / "output" / pdf_path.name
        size = output.stat().st_size if output.exists() else 0
        logger.debug("Merged %s + %s (%d bytes)", pdf_path.name, tif_path.name, size)
        return MergeResult(success=True, detail=stdout.strip(), output_bytes=size)

    async def count_pages(self, directory: Path) -> int:
        """Run the counter; anything unparsable counts as zero pages."""
        try:
            code, stdout, stderr = await _run([*self._count_argv, str(directory)])
        except OSError as exc:
            logger.error("Could not launch page counter %s: %s", self._count_argv, exc)
            return 0

        if code != 0:
            logger.warning("Page counter exited %d: %s", code, stderr.strip())
            return 0

        match = _COUNT_RE.search(stdout)
        return int(match.group(1)) if match else 0


async def _run(argv: list[str]) -> tuple[int, str, str]:
    """Run a command to completion and return (exit code, stdout, stderr)."""
    proc = await asyncio.create_subprocess_exec(
        *argv,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    out, err = await proc.communicate()
    return (
        proc.returncode if proc.returncode is not None else -1,
        out.decode("utf-8", errors="replace"),
        err.decode("utf-8", errors="replace"),
    )
