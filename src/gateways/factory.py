# src/gateways/factory.py — v1
"""Factories: instantiate remote store, converter and notifier from configuration."""

from __future__ import annotations

from ftpbatch.config.settings import Settings
from ftpbatch.gateways.base_converter import BaseConverter
from ftpbatch.gateways.base_notifier import BaseNotifier, LogNotifier
from ftpbatch.gateways.base_remote_store import BaseRemoteStore
from ftpbatch.gateways.process_converter import ProcessConverter


def create_remote_store(settings: Settings) -> BaseRemoteStore:
    """Create the remote store backend selected by REMOTE_STORE.

    Raises:
        ValueError: If the backend is unsupported or under-configured.
    """
    if settings.remote_store == "sftp":
        from ftpbatch.gateways.sftp_store import SftpStore

        if not settings.ftp_host:
            raise ValueError("FTP_HOST must be set when REMOTE_STORE=sftp")
        return SftpStore(
            host=settings.ftp_host,
            port=settings.ftp_port,
            username=settings.ftp_user,
            password=settings.ftp_password or None,
            key_path=settings.ftp_key_path or None,
            timeout=settings.ftp_timeout,
        )

    if settings.remote_store == "local":
        from ftpbatch.gateways.local_store import LocalDirectoryStore

        if not settings.local_remote_root:
            raise ValueError(
                "LOCAL_REMOTE_ROOT must be set when REMOTE_STORE=local"
            )
        return LocalDirectoryStore(settings.local_remote_root)

    raise ValueError(f"Unsupported remote store: {settings.remote_store!r}")


def create_converter(settings: Settings) -> BaseConverter:
    """Create the subprocess converter from the configured executables."""
    if not settings.converter_merge_command or not settings.converter_count_command:
        raise ValueError(
            "CONVERTER_MERGE_COMMAND and CONVERTER_COUNT_COMMAND must be set"
        )
    return ProcessConverter(
        merge_command=settings.converter_merge_command,
        count_command=settings.converter_count_command,
    )


def create_notifier(settings: Settings) -> BaseNotifier:
    """Create the notifier selected by NOTIFIER.

    Raises:
        ValueError: If SendGrid is selected without key, sender or recipients.
    """
    if settings.notifier == "none":
        return LogNotifier()

    if settings.notifier == "sendgrid":
        from ftpbatch.gateways.sendgrid_notifier import SendGridNotifier

        missing = [
            name for name, value in (
                ("SENDGRID_API_KEY", settings.sendgrid_api_key),
                ("EMAIL_FROM", settings.email_from),
                ("EMAIL_TO", settings.email_to_list),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                f"{', '.join(missing)} must be set when NOTIFIER=sendgrid"
            )
        return SendGridNotifier(
            api_key=settings.sendgrid_api_key,
            sender=settings.email_from,
            recipients=settings.email_to_list,
            cc=settings.email_cc_list,
        )

    raise ValueError(f"Unsupported notifier: {settings.notifier!r}")
