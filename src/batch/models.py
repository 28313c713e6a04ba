# src/batch/models.py — v2
"""Batch processing models: BatchStage, BatchState, BatchSummary, RunSummary."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ftpbatch.core.models import ErrorRecord, RemoteFileDescriptor


class BatchStage(str, Enum):
    """Lifecycle states, in the only order they may be visited."""

    CREATED = "created"
    DOWNLOADED = "downloaded"
    MERGED = "merged"
    VERIFIED = "verified"
    UPLOADED = "uploaded"
    REPORTED = "reported"
    ARCHIVED = "archived"
    CLEANED_UP = "cleaned_up"
    ABORTED = "aborted"


class BatchState(BaseModel):
    """Immutable snapshot of one batch between lifecycle stages.

    Stages never modify a state in place; they return an updated copy via
    ``advance()``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    batch_type: str
    folder: str
    files: tuple[RemoteFileDescriptor, ...]
    workspace: Path
    stage: BatchStage = BatchStage.CREATED
    errors: tuple[ErrorRecord, ...] = ()
    uploaded: tuple[str, ...] = ()
    page_count: int = 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def advance(
        self,
        stage: BatchStage,
        new_errors: list[ErrorRecord] | None = None,
        **updates: object,
    ) -> BatchState:
        """Return a copy moved to ``stage`` with ``new_errors`` appended."""
        update: dict[str, object] = {"stage": stage, **updates}
        if new_errors:
            update["errors"] = self.errors + tuple(new_errors)
        return self.model_copy(update=update)


class BatchSummary(BaseModel):
    """Outcome of one batch, as reported at the end of a pass."""

    name: str
    folder: str
    file_count: int
    stage: BatchStage
    errors: list[ErrorRecord] = Field(default_factory=list)
    page_count: int = 0

    @classmethod
    def from_state(cls, state: BatchState) -> BatchSummary:
        return cls(
            name=state.name,
            folder=state.folder,
            file_count=len(state.files),
            stage=state.stage,
            errors=list(state.errors),
            page_count=state.page_count,
        )


class RunSummary(BaseModel):
    """Summary of one full pass over all configured folders."""

    folders_processed: int = 0
    batches_found: int = 0
    completed: int = 0
    aborted: int = 0
    batches: list[BatchSummary] = Field(default_factory=list)
    duration_seconds: float = 0.0
