# src/main.py — v2
"""CLI entry point — run, schedule, plan commands.

Usage:
    ftpbatch run            one full pass over all configured folders
    ftpbatch schedule       run passes on the configured weekly schedule
    ftpbatch plan           list the batches a pass would process
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from ftpbatch.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
    except Exception as exc:
        _setup_logging(None, args.verbose)
        logger.error("Invalid configuration: %s", exc)
        return 1

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ftpbatch",
        description=f"ftpbatch v{__version__} - SFTP PDF/TIF batch automation",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--env-file", default=".env",
        help="Settings file (default: .env)",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_run = subparsers.add_parser("run", help="Run one full pass now")
    p_run.set_defaults(func=_cmd_run)

    p_schedule = subparsers.add_parser(
        "schedule", help="Run passes on the configured schedule",
    )
    p_schedule.add_argument(
        "--max-passes", type=int, default=None,
        help="Stop after this many passes (default: run forever)",
    )
    p_schedule.set_defaults(func=_cmd_schedule)

    p_plan = subparsers.add_parser(
        "plan", help="Show how remote files would be grouped, without processing",
    )
    p_plan.set_defaults(func=_cmd_plan)

    return parser


def _load_settings(args: argparse.Namespace):
    from ftpbatch.config.settings import load_settings

    return load_settings(_env_file=args.env_file)


async def _cmd_run(args: argparse.Namespace, settings) -> int:
    """Execute a single pass."""
    from ftpbatch.run.orchestrator import RunOrchestrator

    summary = await RunOrchestrator(settings).run()
    _print_summary(summary)
    return 0


async def _cmd_schedule(args: argparse.Namespace, settings) -> int:
    """Run passes on the weekly schedule."""
    from ftpbatch.run.orchestrator import RunOrchestrator
    from ftpbatch.run.scheduler import run_on_schedule

    async def _one_pass() -> None:
        summary = await RunOrchestrator(settings).run()
        _print_summary(summary)

    logger.info(
        "Scheduling passes on weekdays %s at %02d:%02d",
        settings.schedule_days_list, settings.schedule_hour, settings.schedule_minute,
    )
    await run_on_schedule(
        _one_pass,
        days=settings.schedule_days_list,
        hour=settings.schedule_hour,
        minute=settings.schedule_minute,
        max_passes=args.max_passes,
    )
    return 0


async def _cmd_plan(args: argparse.Namespace, settings) -> int:
    """Print the batches each folder would produce."""
    from ftpbatch.batch.lifecycle import derive_batch_name, derive_batch_type
    from ftpbatch.run.orchestrator import RunOrchestrator

    plan = await RunOrchestrator(settings).plan()
    for folder, batches in plan.items():
        print(f"\n{folder}: {len(batches)} batches")
        batch_type = derive_batch_type(folder, settings.ftp_source_folder)
        for group in batches:
            print(f"  {derive_batch_name(batch_type, group)}  ({len(group)} files)")
            for f in group:
                print(f"    {f.modify_time.astimezone():%Y-%m-%d %H:%M:%S}  {f.name}")
    return 0


def _print_summary(summary: object) -> None:
    """Print a human-readable summary of a RunSummary."""
    print("\nPass complete:")
    print(f"  Folders:    {summary.folders_processed}")
    print(f"  Batches:    {summary.batches_found}")
    print(f"  Completed:  {summary.completed}")
    print(f"  Aborted:    {summary.aborted}")
    print(f"  Duration:   {summary.duration_seconds:.1f}s")
    for batch in summary.batches:
        print(f"  - {batch.name}: {batch.stage.value} ({len(batch.errors)} errors)")


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging from settings (console only if settings are unusable)."""
    from ftpbatch.logging.logger import setup_logging

    if settings is None:
        setup_logging(level="DEBUG" if verbose else "INFO")
        return
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
