# src/gateways/sftp_store.py — v1
"""SFTP remote store (REMOTE_STORE=sftp).

Requires the 'paramiko' package: pip install paramiko.
All paramiko calls block, so each one runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import stat
from pathlib import Path

from ftpbatch.core.models import RemoteFileDescriptor
from ftpbatch.gateways.base_remote_store import BaseRemoteStore

logger = logging.getLogger(__name__)


class SftpStore(BaseRemoteStore):
    """Remote store backed by a paramiko SSH/SFTP session."""

    def __init__(
        self,
        host: str,
        username: str,
        password: str | None = None,
        port: int = 22,
        key_path: str | None = None,
        timeout: float = 20.0,
    ) -> None:
        """Initialize SFTP store.

        Args:
            host: SSH host name.
            username: Login user.
            password: Password (optional when a key is used).
            port: SSH port.
            key_path: Private key file (optional).
            timeout: TCP connect timeout in seconds.
        """
        try:
            import paramiko
        except ImportError as e:
            raise ImportError(
                "paramiko package required for SFTP store: pip install paramiko"
            ) from e

        self._paramiko = paramiko
        self._host = host
        self._port = port
        self._username = username
        self._password = password or None
        self._key_path = key_path or None
        self._timeout = timeout
        self._ssh = None
        self._sftp = None

    async def connect(self) -> None:
        """Open the SSH transport and SFTP channel."""
        if self._sftp is not None:
            return
        await asyncio.to_thread(self._connect_blocking)
        logger.info("Connected to sftp://%s@%s:%d", self._username, self._host, self._port)

    def _connect_blocking(self) -> None:
        client = self._paramiko.SSHClient()
        client.set_missing_host_key_policy(self._paramiko.AutoAddPolicy())
        kwargs: dict = {
            "hostname": self._host,
            "port": self._port,
            "username": self._username,
            "timeout": self._timeout,
        }
        if self._password:
            kwargs["password"] = self._password
        if self._key_path:
            kwargs["key_filename"] = self._key_path
        client.connect(**kwargs)
        self._ssh = client
        self._sftp = client.open_sftp()

    async def close(self) -> None:
        """Close the SFTP channel and SSH transport."""
        sftp, ssh = self._sftp, self._ssh
        self._sftp = None
        self._ssh = None
        if sftp is not None:
            await asyncio.to_thread(sftp.close)
        if ssh is not None:
            await asyncio.to_thread(ssh.close)
            logger.info("Disconnected from %s", self._host)

    @property
    def _channel(self):
        if self._sftp is None:
            raise RuntimeError("SFTP store is not connected")
        return self._sftp

    async def list(self, folder: str) -> list[RemoteFileDescriptor]:
        """List regular files in a remote folder."""
        attrs = await asyncio.to_thread(self._channel.listdir_attr, folder)
        return [
            RemoteFileDescriptor.from_epoch(
                name=a.filename,
                mtime=float(a.st_mtime or 0),
                size=int(a.st_size or 0),
            )
            for a in attrs
            if a.st_mode is None or stat.S_ISREG(a.st_mode)
        ]

    async def fetch(self, remote_path: str, local_path: Path) -> None:
        """Download a remote file."""
        await asyncio.to_thread(self._channel.get, remote_path, str(local_path))
        logger.debug("sftp get %s -> %s", remote_path, local_path)

    async def put(self, local_path: Path, remote_path: str) -> None:
        """Upload a local file."""
        await asyncio.to_thread(self._channel.put, str(local_path), remote_path)
        logger.debug("sftp put %s -> %s", local_path, remote_path)

    async def delete(self, remote_path: str) -> None:
        """Remove a remote file."""
        await asyncio.to_thread(self._channel.remove, remote_path)
        logger.debug("sftp rm %s", remote_path)
