# src/batch/lifecycle.py — v1
"""Batch lifecycle controller.

Carries one batch through a strictly linear sequence of stages:

    created -> downloaded -> merged -> verified -> uploaded -> reported
            -> archived -> cleaned_up

    verified -> aborted   (any error accumulated by verification)

Each stage takes a BatchState and returns an updated copy. Recoverable
problems (merge failures, verification mismatches, unconfirmed uploads)
are accumulated on the state; everything else raises and ends the batch.
Errors are inspected once, right after verification, to decide whether the
batch goes on to upload, report, archive and cleanup at all.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from ftpbatch.batch.models import BatchStage, BatchState
from ftpbatch.batch.verification import companion_tif, list_pdfs, verify_outputs
from ftpbatch.batch.workspace import (
    allocate_workspace,
    input_dir,
    output_dir,
    workspace_dir,
)
from ftpbatch.core.models import ErrorRecord, RemoteFileDescriptor
from ftpbatch.gateways.base_remote_store import join_remote
from ftpbatch.logging.context import set_batch_context, set_stage_context
from ftpbatch.notify.report import (
    build_report_data,
    load_template,
    render_report,
    report_subject,
)

if TYPE_CHECKING:
    from ftpbatch.config.settings import Settings
    from ftpbatch.gateways.base_converter import BaseConverter
    from ftpbatch.gateways.base_notifier import BaseNotifier
    from ftpbatch.gateways.base_remote_store import BaseRemoteStore

logger = logging.getLogger(__name__)


class InvalidBatchError(ValueError):
    """Batch construction arguments are missing or empty."""


class StageOrderError(RuntimeError):
    """A stage was called on a batch that is not in its entry state."""


class RemoteFileNotFoundError(LookupError):
    """A downloaded file has no matching entry in the remote listing."""


def derive_batch_type(folder: str, source_prefix: str = "") -> str:
    """Remote folder minus the configured source prefix, usable as a path part."""
    batch_type = folder.replace(source_prefix, "", 1) if source_prefix else folder
    return batch_type.strip("/").replace("/", "_")


def format_batch_timestamp(ts: datetime) -> str:
    """Local-time ``YYYY-MM-DD_hhmma``, e.g. ``2026-10-16_0945pm``."""
    local = ts.astimezone()
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{local.strftime('%Y-%m-%d_%I%M')}{meridiem}"


def derive_batch_name(batch_type: str, files: Sequence[RemoteFileDescriptor]) -> str:
    earliest = min(f.modify_time for f in files)
    return f"{batch_type}_{format_batch_timestamp(earliest)}"


async def open_batch(
    folder: str,
    files: Sequence[RemoteFileDescriptor],
    store: BaseRemoteStore | None,
    work_root: Path,
    source_prefix: str = "",
) -> BatchState:
    """Validate arguments, derive identity and allocate a fresh workspace.

    Raises:
        InvalidBatchError: No files, no folder, or no remote store.
    """
    if not files or not folder or store is None:
        raise InvalidBatchError("Missing or invalid batch arguments")

    batch_type = derive_batch_type(folder, source_prefix)
    name = derive_batch_name(batch_type, files)
    workspace = workspace_dir(Path(work_root), name)
    await allocate_workspace(workspace)

    logger.info("Opened batch %s: %d files from %s", name, len(files), folder)
    return BatchState(
        name=name,
        batch_type=batch_type,
        folder=folder,
        files=tuple(files),
        workspace=workspace,
    )


def _copy_file(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)


def _list_files(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if p.is_file())


class BatchController:
    """Run the lifecycle stages of a batch against the external gateways.

    Args:
        store: Remote store, already connected.
        converter: Merge/count tool.
        notifier: Report delivery.
        settings: Paths and remote folder prefixes.
    """

    def __init__(
        self,
        store: BaseRemoteStore,
        converter: BaseConverter,
        notifier: BaseNotifier,
        settings: Settings,
    ) -> None:
        self._store = store
        self._converter = converter
        self._notifier = notifier
        self._settings = settings
        self._template: str | None = None

    @property
    def template(self) -> str:
        """Report template, read on first use."""
        if self._template is None:
            self._template = load_template(self._settings.report_template)
        return self._template

    def production_dir(self, state: BatchState) -> Path:
        return self._settings.production_path / state.name

    def destination_folder(self, state: BatchState) -> str:
        return f"{self._settings.ftp_dest_folder}{state.batch_type}"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    async def open(
        self, folder: str, files: Sequence[RemoteFileDescriptor],
    ) -> BatchState:
        """Create a batch for ``files`` found in ``folder``."""
        state = await open_batch(
            folder=folder,
            files=files,
            store=self._store,
            work_root=self._settings.work_root,
            source_prefix=self._settings.ftp_source_folder,
        )
        set_batch_context(state.name)
        return state

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def download(self, state: BatchState) -> BatchState:
        """Fetch every source file into input/, one at a time, in order."""
        _enter(state, BatchStage.CREATED, "download")
        target = input_dir(state.workspace)
        for file in state.files:
            remote = join_remote(state.folder, file.name)
            logger.info("Downloading %s", remote)
            await self._store.fetch(remote, target / file.name)
        return state.advance(BatchStage.DOWNLOADED)

    async def merge(self, state: BatchState) -> BatchState:
        """Merge PDF/TIF pairs and copy lone PDFs to output/.

        Merges run one at a time; lone-PDF copies run concurrently once
        the whole input has been scanned. Non-PDF inputs are ignored.
        """
        _enter(state, BatchStage.DOWNLOADED, "merge")
        source = input_dir(state.workspace)
        target = output_dir(state.workspace)

        errors: list[ErrorRecord] = []
        lone: list[Path] = []
        for pdf in list_pdfs(source):
            tif = companion_tif(pdf)
            if not tif.exists():
                lone.append(pdf)
                continue
            logger.info("Merging %s with %s", pdf.name, tif.name)
            result = await self._converter.merge(pdf, tif)
            if not result.success:
                err = ErrorRecord(message=f"Merge failed: {result.detail}", reference=pdf.name)
                logger.error("%s", err)
                errors.append(err)

        await asyncio.gather(
            *(asyncio.to_thread(_copy_file, pdf, target / pdf.name) for pdf in lone)
        )
        logger.info("Merge done: %d copied unchanged", len(lone))
        return state.advance(BatchStage.MERGED, errors)

    async def verify(self, state: BatchState) -> BatchState:
        """Compare every input PDF with its output."""
        _enter(state, BatchStage.MERGED, "verify")
        errors = verify_outputs(input_dir(state.workspace), output_dir(state.workspace))
        for err in errors:
            logger.error("Verification: %s", err)
        return state.advance(BatchStage.VERIFIED, errors)

    def gate(self, state: BatchState) -> BatchState:
        """Abort the batch if any error has accumulated so far."""
        _enter(state, BatchStage.VERIFIED, "gate")
        if not state.has_errors:
            logger.info("No errors.")
            return state
        for err in state.errors:
            logger.error("ERROR: %s", err.model_dump_json())
        logger.warning("Batch has errors. Aborting...")
        return state.advance(BatchStage.ABORTED)

    async def upload(self, state: BatchState) -> BatchState:
        """Push every output file to the remote destination and production.

        Each push is confirmed by re-listing the destination folder; an
        unconfirmed upload is recorded and the next file is processed.
        """
        _enter(state, BatchStage.VERIFIED, "upload")
        if state.has_errors:
            raise StageOrderError(f"Batch {state.name} has errors; upload refused")

        destination = self.destination_folder(state)
        production = self.production_dir(state)
        errors: list[ErrorRecord] = []
        confirmed: list[str] = []

        for path in _list_files(output_dir(state.workspace)):
            remote = join_remote(destination, path.name)
            logger.info("Uploading %s to %s", path.name, remote)
            await self._store.put(path, remote)

            listing = await self._store.list(destination)
            if any(entry.name == path.name for entry in listing):
                confirmed.append(path.name)
                logger.info("Upload successful for %s", path.name)
            else:
                err = ErrorRecord(
                    message=f"Upload failed for {path.name} at {datetime.now().astimezone().isoformat()}",
                    reference=path.name,
                )
                logger.error("%s", err.message)
                errors.append(err)

            await asyncio.to_thread(_copy_file, path, production / path.name)

        return state.advance(BatchStage.UPLOADED, errors, uploaded=tuple(confirmed))

    async def report(self, state: BatchState) -> BatchState:
        """Count output pages and notify the operator; zero pages sends nothing."""
        _enter(state, BatchStage.UPLOADED, "report")
        target = output_dir(state.workspace)
        pages = await self._converter.count_pages(target)
        if not pages:
            logger.warning("No output. Didn't send email report.")
            return state.advance(BatchStage.REPORTED)

        filenames = [p.name for p in _list_files(target)]
        data = build_report_data(
            batch_name=state.name,
            production_path=self.production_dir(state),
            page_count=pages,
            filenames=filenames,
        )
        await self._notifier.send(report_subject(state.name), render_report(data, self.template))
        logger.info("Report sent: %d pages in %d files", pages, len(filenames))
        return state.advance(BatchStage.REPORTED, page_count=pages)

    async def archive(self, state: BatchState) -> BatchState:
        """Copy the whole workspace under the archive root."""
        _enter(state, BatchStage.REPORTED, "archive")
        destination = self._settings.archive_root / state.name
        logger.info("Archiving batch files to %s", destination)
        await asyncio.to_thread(
            shutil.copytree, state.workspace, destination, dirs_exist_ok=True,
        )
        logger.info("Archive complete for %s", state.name)
        return state.advance(BatchStage.ARCHIVED)

    async def cleanup(self, state: BatchState) -> BatchState:
        """Delete every downloaded file from the remote source folder.

        Raises:
            RemoteFileNotFoundError: A local input has no remote counterpart.
        """
        _enter(state, BatchStage.ARCHIVED, "cleanup")
        logger.info("Cleaning up remote folder: %s", state.folder)
        remote = {entry.name: entry for entry in await self._store.list(state.folder)}

        for path in _list_files(input_dir(state.workspace)):
            entry = remote.get(path.name)
            if entry is None:
                raise RemoteFileNotFoundError(
                    f"{path.name} not found in remote folder {state.folder}"
                )
            remote_path = join_remote(state.folder, entry.name)
            logger.info("Deleting %s", remote_path)
            await self._store.delete(remote_path)

        return state.advance(BatchStage.CLEANED_UP)

    # ------------------------------------------------------------------
    # Full lifecycle
    # ------------------------------------------------------------------

    async def process(self, state: BatchState) -> BatchState:
        """Drive a freshly opened batch through every stage.

        Returns the final state: ``cleaned_up`` or ``aborted``. Fatal
        errors propagate.
        """
        state = await self.download(state)
        state = await self.merge(state)
        state = await self.verify(state)
        state = self.gate(state)
        if state.stage is BatchStage.ABORTED:
            set_stage_context(None)
            return state

        state = await self.upload(state)
        state = await self.report(state)
        state = await self.archive(state)
        state = await self.cleanup(state)
        set_stage_context(None)

        if state.has_errors:
            logger.warning(
                "Batch complete with %d upload errors", len(state.errors),
            )
        else:
            logger.info("Batch complete.")
        return state


def _enter(state: BatchState, expected: BatchStage, stage_name: str) -> None:
    """Check the entry state of a stage and tag subsequent log records."""
    if state.stage is not expected:
        raise StageOrderError(
            f"Cannot {stage_name} batch {state.name} in state {state.stage.value}"
        )
    set_stage_context(stage_name)
    logger.debug("Entering %s", stage_name)
