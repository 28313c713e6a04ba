# src/gateways/sendgrid_notifier.py — v1
"""SendGrid e-mail notifier (NOTIFIER=sendgrid).

Requires the 'sendgrid' package: pip install sendgrid.
"""

from __future__ import annotations

import asyncio
import logging

from ftpbatch.gateways.base_notifier import BaseNotifier

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """The mail API rejected a message."""


class SendGridNotifier(BaseNotifier):
    """Send HTML reports through the SendGrid v3 mail API."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        recipients: list[str],
        cc: list[str] | None = None,
    ) -> None:
        """Initialize the notifier.

        Args:
            api_key: SendGrid API key.
            sender: From address.
            recipients: To addresses (at least one).
            cc: Cc addresses.
        """
        if not recipients:
            raise ValueError("SendGridNotifier needs at least one recipient")
        self._api_key = api_key
        self._sender = sender
        self._recipients = list(recipients)
        self._cc = [c for c in (cc or []) if c not in self._recipients]
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init SendGrid client (only on first send)."""
        if self.__client is None:
            try:
                import sendgrid
            except ImportError as e:
                raise ImportError(
                    "sendgrid package required: pip install sendgrid"
                ) from e
            self.__client = sendgrid.SendGridAPIClient(api_key=self._api_key)
        return self.__client

    def _build_message(self, subject: str, html: str):
        from sendgrid.helpers.mail import Cc, Mail

        message = Mail(
            from_email=self._sender,
            to_emails=self._recipients,
            subject=subject,
            html_content=html,
        )
        for address in self._cc:
            message.add_cc(Cc(address))
        return message

    async def send(self, subject: str, html: str) -> None:
        """Send one HTML message; a non-2xx response raises NotificationError."""
        message = self._build_message(subject, html)
        response = await asyncio.to_thread(self._client.send, message)
        status = getattr(response, "status_code", 0)
        if not 200 <= status < 300:
            raise NotificationError(f"SendGrid returned HTTP {status} for {subject!r}")
        logger.info(
            "Sent %r to %d recipients (%d cc)",
            subject, len(self._recipients), len(self._cc),
        )
