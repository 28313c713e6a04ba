# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides an in-memory remote store, a fake converter, sample descriptors and
settings rooted in a temp directory. No network or external binaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from ftpbatch.config.settings import Settings
from ftpbatch.core.models import RemoteFileDescriptor
from ftpbatch.gateways.base_converter import BaseConverter, MergeResult
from ftpbatch.gateways.base_notifier import BaseNotifier
from ftpbatch.gateways.base_remote_store import BaseRemoteStore

PDF_BYTES = b"%PDF-1.4\n" + b"p" * 200
TIF_BYTES = b"II*\x00" + b"t" * 120
T0 = datetime(2026, 10, 16, 21, 45, 0, tzinfo=timezone.utc)


# === Fakes ===


@dataclass
class _RemoteEntry:
    data: bytes
    modify_time: datetime


class MemoryStore(BaseRemoteStore):
    """Remote store kept in a dict; records every call in order."""

    def __init__(self) -> None:
        self.tree: dict[str, dict[str, _RemoteEntry]] = {}
        self.calls: list[tuple[str, str]] = []
        # Remote paths left out of listings, as if an upload never landed
        self.hidden: set[str] = set()
        self.connected = False

    def add(self, folder: str, name: str, data: bytes, modify_time: datetime) -> None:
        self.tree.setdefault(folder.rstrip("/"), {})[name] = _RemoteEntry(data, modify_time)

    def names(self, folder: str) -> list[str]:
        return sorted(self.tree.get(folder.rstrip("/"), {}))

    def calls_of(self, op: str) -> list[str]:
        return [target for name, target in self.calls if name == op]

    @staticmethod
    def _split(remote_path: str) -> tuple[str, str]:
        folder, _, name = remote_path.rpartition("/")
        return folder, name

    async def connect(self) -> None:
        self.connected = True
        self.calls.append(("connect", ""))

    async def close(self) -> None:
        self.connected = False
        self.calls.append(("close", ""))

    async def list(self, folder: str) -> list[RemoteFileDescriptor]:
        self.calls.append(("list", folder))
        entries = self.tree.get(folder.rstrip("/"), {})
        return [
            RemoteFileDescriptor(name=name, modify_time=e.modify_time, size=len(e.data))
            for name, e in entries.items()
            if f"{folder.rstrip('/')}/{name}" not in self.hidden
        ]

    async def fetch(self, remote_path: str, local_path: Path) -> None:
        self.calls.append(("fetch", remote_path))
        folder, name = self._split(remote_path)
        try:
            entry = self.tree[folder][name]
        except KeyError:
            raise FileNotFoundError(remote_path) from None
        local_path.write_bytes(entry.data)

    async def put(self, local_path: Path, remote_path: str) -> None:
        self.calls.append(("put", remote_path))
        folder, name = self._split(remote_path)
        self.add(folder, name, local_path.read_bytes(), datetime.now(timezone.utc))

    async def delete(self, remote_path: str) -> None:
        self.calls.append(("delete", remote_path))
        folder, name = self._split(remote_path)
        del self.tree[folder][name]


class FakeConverter(BaseConverter):
    """Concatenates PDF and TIF into output/<pdf name>; counts one page per file."""

    def __init__(self, fail_on: set[str] | None = None, pages: int | None = None) -> None:
        self.fail_on = fail_on or set()
        self.pages = pages
        self.merges: list[tuple[str, str]] = []
        self.counts: list[Path] = []

    async def merge(self, pdf_path: Path, tif_path: Path) -> MergeResult:
        self.merges.append((pdf_path.name, tif_path.name))
        if pdf_path.name in self.fail_on:
            return MergeResult(success=False, detail="converter crashed")
        output = pdf_path.parent.parent / "output" / pdf_path.name
        output.write_bytes(pdf_path.read_bytes() + tif_path.read_bytes())
        return MergeResult(success=True, output_bytes=output.stat().st_size)

    async def count_pages(self, directory: Path) -> int:
        self.counts.append(directory)
        if self.pages is not None:
            return self.pages
        return sum(1 for p in directory.iterdir() if p.is_file())


@dataclass
class RecordingNotifier(BaseNotifier):
    """Keeps every sent message."""

    sent: list[tuple[str, str]] = field(default_factory=list)

    async def send(self, subject: str, html: str) -> None:
        self.sent.append((subject, html))


# === FIXTURES: Sample data ===


def make_descriptors(
    names: list[str],
    start: datetime = T0,
    step: timedelta = timedelta(seconds=5),
) -> list[RemoteFileDescriptor]:
    """Descriptors spaced ``step`` apart, in the given order."""
    return [
        RemoteFileDescriptor(name=name, modify_time=start + i * step, size=100)
        for i, name in enumerate(names)
    ]


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def fake_converter() -> FakeConverter:
    return FakeConverter()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with every local tree under tmp_path."""
    return Settings(
        _env_file=None,
        remote_store="local",
        local_remote_root=str(tmp_path / "remote"),
        ftp_source_folder="/in/",
        ftp_folders_to_process="/in/clientA",
        ftp_dest_folder="/out/",
        work_root=tmp_path / "wip",
        archive_root=tmp_path / "archive",
        production_path=tmp_path / "production",
        notifier="none",
    )
