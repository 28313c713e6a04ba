# src/core/models.py — v2
"""Core domain models shared across the batch pipeline: RemoteFileDescriptor, ErrorRecord."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator


class RemoteFileDescriptor(BaseModel):
    """One regular file found in a remote folder listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    modify_time: datetime
    size: int = 0

    @field_validator("modify_time")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:  # noqa: N805
        """Naive timestamps are taken to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_epoch(cls, name: str, mtime: float, size: int = 0) -> RemoteFileDescriptor:
        """Build a descriptor from a POSIX modification time in seconds."""
        return cls(
            name=name,
            modify_time=datetime.fromtimestamp(mtime, tz=timezone.utc),
            size=size,
        )


class ErrorRecord(BaseModel):
    """A recoverable problem recorded against a batch."""

    model_config = ConfigDict(frozen=True)

    message: str
    reference: str | None = None

    def __str__(self) -> str:
        if self.reference:
            return f"{self.message}: {self.reference}"
        return self.message
