"""SFTP fetcher for legacy build artifacts"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import paramiko

from ..api.exceptions import ArtifactTransferError
from ..models.manifest import SlugSource
from ..utils.file_utils import ensure_parent_dir
from .base import RemoteFileFetcher

logger = logging.getLogger(__name__)

DEFAULT_SFTP_PORT = 22


class SftpFileFetcher(RemoteFileFetcher):
    """RemoteFileFetcher over SFTP (paramiko), run in worker threads"""

    def __init__(self, timeout: float = 60.0):
        """
        Initialize SFTP fetcher

        Args:
            timeout: Connect and banner timeout in seconds
        """
        self.timeout = timeout
        self._client: Optional[paramiko.SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None

    def _connect(self, source: SlugSource) -> paramiko.SSHClient:
        try:
            port = int(source.port) if source.port else DEFAULT_SFTP_PORT
        except ValueError:
            port = DEFAULT_SFTP_PORT

        client = paramiko.SSHClient()
        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            client.connect(
                source.host,
                port=port,
                username=source.username or None,
                password=source.password or None,
                timeout=self.timeout,
                banner_timeout=self.timeout,
                allow_agent=False,
                look_for_keys=False,
            )
        except Exception:
            client.close()
            raise
        return client

    async def connect(self, source: SlugSource) -> None:
        if not source.host:
            raise ArtifactTransferError("No remote host given for the build artifact")
        try:
            self._client = await asyncio.to_thread(self._connect, source)
            self._sftp = await asyncio.to_thread(self._client.open_sftp)
        except (OSError, paramiko.SSHException) as e:
            await self.close()
            raise ArtifactTransferError(f"Failed to connect to {source.host}: {e}") from e
        logger.debug(f"Connected to {source.host}")

    def _download(self, remote_path: str, local_path: Path) -> None:
        ensure_parent_dir(local_path)
        self._sftp.get(remote_path, str(local_path))

    async def download(self, remote_path: str, local_path: Path) -> None:
        if self._sftp is None:
            raise ArtifactTransferError("Fetcher is not connected")
        try:
            await asyncio.to_thread(self._download, remote_path, local_path)
        except (OSError, paramiko.SSHException) as e:
            raise ArtifactTransferError(f"Failed to download {remote_path}: {e}") from e
        logger.info(f"Downloaded {remote_path} to {local_path}")

    async def close(self) -> None:
        sftp, self._sftp = self._sftp, None
        client, self._client = self._client, None
        if sftp is not None:
            await asyncio.to_thread(sftp.close)
        if client is not None:
            await asyncio.to_thread(client.close)
