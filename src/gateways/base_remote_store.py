# src/gateways/base_remote_store.py — v1
"""Abstract remote store interface: list / fetch / put / delete."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ftpbatch.core.models import RemoteFileDescriptor


class BaseRemoteStore(ABC):
    """Unified interface for the remote file-transfer endpoint.

    A single connection is reused sequentially for a whole pass; callers
    never issue overlapping operations.
    """

    async def connect(self) -> None:
        """Open the connection (no-op for connectionless backends)."""

    async def close(self) -> None:
        """Close the connection (no-op for connectionless backends)."""

    @abstractmethod
    async def list(self, folder: str) -> list[RemoteFileDescriptor]:
        """List regular files directly inside ``folder``."""

    @abstractmethod
    async def fetch(self, remote_path: str, local_path: Path) -> None:
        """Download ``remote_path`` to ``local_path``."""

    @abstractmethod
    async def put(self, local_path: Path, remote_path: str) -> None:
        """Upload ``local_path`` to ``remote_path``."""

    @abstractmethod
    async def delete(self, remote_path: str) -> None:
        """Remove ``remote_path``."""

    async def __aenter__(self) -> BaseRemoteStore:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def join_remote(folder: str, name: str) -> str:
    """Join a remote folder and a file name with exactly one '/'."""
    if not folder:
        return name
    return f"{folder.rstrip('/')}/{name}"
