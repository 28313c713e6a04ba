# src/run/scheduler.py — v1
"""Recurring schedule for batch passes.

Passes start at a fixed local wall-clock time on selected weekdays
(by default Sunday to Friday at 22:00). A failing pass is logged and the
scheduler waits for the next slot.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, timedelta
from typing import Any

logger = logging.getLogger(__name__)


def next_run_time(
    now: datetime,
    days: Iterable[int],
    hour: int,
    minute: int,
) -> datetime:
    """Return the first slot strictly after ``now``.

    Args:
        now: Current local time.
        days: Allowed weekdays, Monday == 0.
        hour: Start hour.
        minute: Start minute.

    Raises:
        ValueError: If no weekday is allowed.
    """
    allowed = set(days)
    if not allowed:
        raise ValueError("No schedule days configured")

    base = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    for offset in range(8):
        candidate = base + timedelta(days=offset)
        if candidate > now and candidate.weekday() in allowed:
            return candidate
    raise ValueError(f"No slot found for days {sorted(allowed)}")  # unreachable


async def run_on_schedule(
    run_pass: Callable[[], Awaitable[Any]],
    days: Iterable[int],
    hour: int,
    minute: int,
    clock: Callable[[], datetime] = datetime.now,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    max_passes: int | None = None,
) -> int:
    """Wait for each slot and run a pass, forever or ``max_passes`` times.

    Returns:
        Number of passes started.
    """
    days = list(days)
    passes = 0
    while max_passes is None or passes < max_passes:
        now = clock()
        slot = next_run_time(now, days, hour, minute)
        logger.info("Next pass scheduled at %s", slot.isoformat(timespec="minutes"))
        await sleep((slot - now).total_seconds())

        passes += 1
        try:
            await run_pass()
        except Exception:
            logger.exception("Scheduled pass failed")
    return passes
