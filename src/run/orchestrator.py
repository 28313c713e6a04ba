# src/run/orchestrator.py — v1
"""Run orchestrator — one full pass over every configured remote folder.

For each folder: list the remote files, group them into batches, and drive
each batch through its lifecycle. Batches run strictly one after another
over a single remote connection. A batch with accumulated errors is
aborted and the pass moves on; a fatal error ends the pass.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from ftpbatch.batch.grouping import group_files
from ftpbatch.batch.lifecycle import BatchController
from ftpbatch.batch.models import BatchStage, BatchState, BatchSummary, RunSummary
from ftpbatch.batch.workspace import empty_dir
from ftpbatch.gateways.factory import (
    create_converter,
    create_notifier,
    create_remote_store,
)
from ftpbatch.logging.context import clear_context, set_folder_context

if TYPE_CHECKING:
    from ftpbatch.config.settings import Settings
    from ftpbatch.core.models import RemoteFileDescriptor
    from ftpbatch.gateways.base_converter import BaseConverter
    from ftpbatch.gateways.base_notifier import BaseNotifier
    from ftpbatch.gateways.base_remote_store import BaseRemoteStore

logger = logging.getLogger(__name__)


class RunOrchestrator:
    """Top-level driver for a batch pass.

    Gateways default to the ones selected by ``settings``; tests and dry
    runs may pass their own.

    Args:
        settings: Application settings.
        store: Remote store (connected and closed by ``run``).
        converter: Merge/count tool.
        notifier: Report delivery.
    """

    def __init__(
        self,
        settings: Settings,
        store: BaseRemoteStore | None = None,
        converter: BaseConverter | None = None,
        notifier: BaseNotifier | None = None,
    ) -> None:
        self._settings = settings
        self._store = store if store is not None else create_remote_store(settings)
        self._converter = converter if converter is not None else create_converter(settings)
        self._notifier = notifier if notifier is not None else create_notifier(settings)

    @property
    def gap(self) -> timedelta:
        return timedelta(seconds=self._settings.batch_gap_seconds)

    async def run(self) -> RunSummary:
        """Run one full pass and return its summary.

        Raises:
            Exception: Any fatal batch error, after it has been logged.
        """
        t0 = time.perf_counter()
        summary = RunSummary()
        folders = self._settings.folders_list
        if not folders:
            logger.warning("No folders configured in FTP_FOLDERS_TO_PROCESS")

        logger.info("Emptying wip directory %s", self._settings.work_root)
        await asyncio.to_thread(empty_dir, self._settings.work_root)
        logger.info(
            "Beginning batch processing at %s",
            datetime.now().astimezone().isoformat(timespec="seconds"),
        )

        controller = BatchController(
            store=self._store,
            converter=self._converter,
            notifier=self._notifier,
            settings=self._settings,
        )

        await self._store.connect()
        try:
            for folder in folders:
                await self._process_folder(folder, controller, summary)
                summary.folders_processed += 1
        finally:
            await self._store.close()
            clear_context()

        summary.duration_seconds = round(time.perf_counter() - t0, 2)
        logger.info(
            "FTP automation process complete: %d batches, %d completed, %d aborted in %.1fs",
            summary.batches_found, summary.completed, summary.aborted,
            summary.duration_seconds,
        )
        return summary

    async def plan(self) -> dict[str, list[list[RemoteFileDescriptor]]]:
        """List and group every folder without processing anything."""
        batches: dict[str, list[list[RemoteFileDescriptor]]] = {}
        await self._store.connect()
        try:
            for folder in self._settings.folders_list:
                batches[folder] = group_files(await self._store.list(folder), gap=self.gap)
        finally:
            await self._store.close()
        return batches

    async def _process_folder(
        self,
        folder: str,
        controller: BatchController,
        summary: RunSummary,
    ) -> None:
        set_folder_context(folder)
        logger.info("Processing folder: %s", folder)
        files = await self._store.list(folder)
        logger.info("Found %d files", len(files))

        batches = group_files(files, gap=self.gap)
        logger.info("Sorted files into %d batches", len(batches))
        summary.batches_found += len(batches)

        for group in batches:
            state: BatchState | None = None
            try:
                state = await controller.open(folder, group)
                state = await controller.process(state)
            except Exception:
                logger.exception(
                    "Fatal error in batch %s, stopping the pass",
                    state.name if state is not None else f"from {folder}",
                )
                raise

            summary.batches.append(BatchSummary.from_state(state))
            if state.stage is BatchStage.ABORTED:
                summary.aborted += 1
            else:
                summary.completed += 1
            set_folder_context(folder)

        logger.info("Folder complete.")
