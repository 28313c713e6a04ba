# src/gateways/base_notifier.py — v1
"""Abstract notifier interface and the log-only backend (NOTIFIER=none)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class BaseNotifier(ABC):
    """Delivers an HTML report to the fixed operator recipient list."""

    @abstractmethod
    async def send(self, subject: str, html: str) -> None:
        """Send one message."""


class LogNotifier(BaseNotifier):
    """Notifier that only writes the subject to the log."""

    async def send(self, subject: str, html: str) -> None:
        logger.info("Notification (not sent): %s (%d chars)", subject, len(html))
