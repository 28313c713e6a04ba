# src/gateways/local_store.py — v1
"""Local directory standing in for the remote endpoint (REMOTE_STORE=local).

Remote paths are resolved under a root directory, so ``/in/clientA`` maps to
``{root}/in/clientA``. Used for dry runs and end-to-end tests.
"""

from __future__ import annotations

import asyncio
import shutil
from datetime import datetime, timezone
from pathlib import Path

from ftpbatch.core.models import RemoteFileDescriptor
from ftpbatch.gateways.base_remote_store import BaseRemoteStore


class LocalDirectoryStore(BaseRemoteStore):
    """Remote store operating on a local directory tree."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _resolve(self, remote_path: str) -> Path:
        """Resolve a remote path relative to the root."""
        return self._root / remote_path.lstrip("/")

    async def list(self, folder: str) -> list[RemoteFileDescriptor]:
        """List regular files in a folder; a missing folder raises."""
        path = self._resolve(folder)
        if not path.is_dir():
            raise FileNotFoundError(f"No such remote folder: {folder}")
        entries: list[RemoteFileDescriptor] = []
        for child in sorted(path.iterdir()):
            if not child.is_file():
                continue
            st = child.stat()
            entries.append(
                RemoteFileDescriptor(
                    name=child.name,
                    modify_time=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                    size=st.st_size,
                )
            )
        return entries

    async def fetch(self, remote_path: str, local_path: Path) -> None:
        """Copy a file out of the tree."""
        await asyncio.to_thread(shutil.copy2, self._resolve(remote_path), local_path)

    async def put(self, local_path: Path, remote_path: str) -> None:
        """Copy a file into the tree, creating parent folders."""
        dst = self._resolve(remote_path)
        dst.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(shutil.copy2, local_path, dst)

    async def delete(self, remote_path: str) -> None:
        """Remove a file from the tree."""
        self._resolve(remote_path).unlink()
