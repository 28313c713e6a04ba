# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

from ftpbatch.logging.context import (
    clear_context,
    get_context,
    set_batch_context,
    set_folder_context,
    set_stage_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.folder is None
        assert ctx.batch is None
        assert ctx.stage is None

    def test_set_folder_context(self):
        set_folder_context("/in/clientA")
        assert get_context().folder == "/in/clientA"

    def test_new_folder_resets_batch_and_stage(self):
        set_folder_context("/in/clientA")
        set_batch_context("clientA_2026-10-16_0945pm")
        set_stage_context("merge")
        set_folder_context("/in/clientB")
        ctx = get_context()
        assert ctx.folder == "/in/clientB"
        assert ctx.batch is None
        assert ctx.stage is None

    def test_new_batch_resets_stage(self):
        set_batch_context("a")
        set_stage_context("upload")
        set_batch_context("b")
        assert get_context().stage is None

    def test_as_dict_filters_none(self):
        set_folder_context("/in/clientA")
        d = get_context().as_dict()
        assert d == {"folder": "/in/clientA"}

    def test_clear(self):
        set_folder_context("/in/clientA")
        set_batch_context("b")
        set_stage_context("verify")
        clear_context()
        assert get_context().as_dict() == {}
