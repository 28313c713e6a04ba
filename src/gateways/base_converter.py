# src/gateways/base_converter.py — v1
"""Abstract converter interface: merge a PDF/TIF pair, count output pages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel


class MergeResult(BaseModel):
    """Outcome reported by the converter for one PDF/TIF pair."""

    success: bool
    detail: str = ""
    output_bytes: int = 0


class BaseConverter(ABC):
    """Opaque merge/count tool.

    Implementations are invoked one call at a time; they need not be safe
    to run concurrently against the same directory.
    """

    @abstractmethod
    async def merge(self, pdf_path: Path, tif_path: Path) -> MergeResult:
        """Merge ``tif_path`` into ``pdf_path``, writing into the batch output."""

    @abstractmethod
    async def count_pages(self, directory: Path) -> int:
        """Return the page count of all documents in ``directory`` (0 if none)."""
