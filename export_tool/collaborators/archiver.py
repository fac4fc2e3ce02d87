"""Workspace archiver"""

import asyncio
import logging
from pathlib import Path

from ..api.exceptions import ArchivalError
from ..utils.file_utils import create_archive, safe_remove
from .base import Archiver

logger = logging.getLogger(__name__)


class ZipArchiver(Archiver):
    """Zips a directory in a worker thread"""

    async def zip(self, source_dir: Path, destination: Path) -> Path:
        if not source_dir.is_dir():
            raise ArchivalError(f"Cannot archive {source_dir}: not a directory")

        logger.info(f"Creating archive {destination}")
        try:
            safe_remove(destination)
            return await asyncio.to_thread(create_archive, source_dir, destination)
        except OSError as e:
            raise ArchivalError(f"Failed to create archive {destination}: {e}") from e
