# src/logging/context.py — v2
"""Contextual logging support — attach folder, batch and stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# One value per running task; set by the orchestrator and the batch controller.
_folder: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "folder", default=None
)
_batch: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "batch", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    folder: str | None = None
    batch: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        folder=_folder.get(),
        batch=_batch.get(),
        stage=_stage.get(),
    )


def set_folder_context(folder: str) -> None:
    """Set folder-level context (called once per remote folder)."""
    _folder.set(folder)
    _batch.set(None)
    _stage.set(None)


def set_batch_context(batch: str) -> None:
    """Set batch-level context (called once per batch)."""
    _batch.set(batch)
    _stage.set(None)


def set_stage_context(stage: str | None) -> None:
    """Set the lifecycle stage currently executing."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _folder.set(None)
    _batch.set(None)
    _stage.set(None)
