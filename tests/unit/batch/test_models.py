# tests/unit/batch/test_models.py — v2
"""Tests for batch/models.py — BatchState transitions and summaries."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ftpbatch.batch.models import BatchStage, BatchState, BatchSummary, RunSummary
from ftpbatch.core.models import ErrorRecord
from tests.conftest import make_descriptors


def _state(**kwargs) -> BatchState:
    defaults = dict(
        name="clientA_2026-10-16_0945pm",
        batch_type="clientA",
        folder="/in/clientA",
        files=tuple(make_descriptors(["a.pdf", "a.tif"])),
        workspace=Path("/tmp/wip/clientA_2026-10-16_0945pm"),
    )
    defaults.update(kwargs)
    return BatchState(**defaults)


class TestBatchStage:
    def test_values(self):
        assert [s.value for s in BatchStage] == [
            "created", "downloaded", "merged", "verified", "uploaded",
            "reported", "archived", "cleaned_up", "aborted",
        ]

    def test_str_enum(self):
        assert BatchStage("aborted") is BatchStage.ABORTED


class TestBatchState:
    def test_defaults(self):
        s = _state()
        assert s.stage is BatchStage.CREATED
        assert s.errors == ()
        assert s.uploaded == ()
        assert s.page_count == 0
        assert s.has_errors is False

    def test_frozen(self):
        s = _state()
        with pytest.raises(ValidationError):
            s.stage = BatchStage.MERGED  # type: ignore[misc]

    def test_advance_returns_copy(self):
        s = _state()
        nxt = s.advance(BatchStage.DOWNLOADED)
        assert nxt is not s
        assert s.stage is BatchStage.CREATED
        assert nxt.stage is BatchStage.DOWNLOADED
        assert nxt.files == s.files

    def test_advance_appends_errors(self):
        first = ErrorRecord(message="Missing output", reference="a.pdf")
        second = ErrorRecord(message="Output is malformed", reference="b.pdf")
        s = _state().advance(BatchStage.MERGED, [first])
        s = s.advance(BatchStage.VERIFIED, [second])
        assert s.errors == (first, second)
        assert s.has_errors is True

    def test_advance_updates(self):
        s = _state().advance(BatchStage.UPLOADED, uploaded=("a.pdf",), page_count=3)
        assert s.uploaded == ("a.pdf",)
        assert s.page_count == 3


class TestSummaries:
    def test_batch_summary_from_state(self):
        err = ErrorRecord(message="boom")
        s = _state().advance(BatchStage.ABORTED, [err])
        summary = BatchSummary.from_state(s)
        assert summary.name == s.name
        assert summary.folder == "/in/clientA"
        assert summary.file_count == 2
        assert summary.stage is BatchStage.ABORTED
        assert summary.errors == [err]

    def test_run_summary_defaults(self):
        r = RunSummary()
        assert r.folders_processed == 0
        assert r.batches == []
        assert r.duration_seconds == 0.0

    def test_run_summary_serializes(self):
        r = RunSummary(batches=[BatchSummary.from_state(_state())], completed=1)
        dumped = r.model_dump(mode="json")
        assert dumped["batches"][0]["stage"] == "created"
