# export_tool/collaborators/base.py
"""Abstract interfaces of the services an export depends on"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.manifest import ImageCredentials, SlugSource


class ImageService(ABC):
    """Container image transfer"""

    @abstractmethod
    async def pull(self,
                   image: str,
                   credentials: Optional[ImageCredentials] = None,
                   attempts: int = 1) -> None:
        """
        Pull an image from its registry

        Args:
            image: Image reference
            credentials: Registry credentials, if the registry needs them
            attempts: Maximum number of attempts

        Raises:
            ImageOperationError: If every attempt failed
        """
        pass

    @abstractmethod
    async def tag(self, source: str, target: str, attempts: int = 1) -> None:
        """Tag a local image with a new reference"""
        pass

    @abstractmethod
    async def save(self, image: str, destination: Path) -> None:
        """Save one image to a tarball"""
        pass

    @abstractmethod
    async def multi_save(self, images: List[str], destination: Path) -> None:
        """Save several images to one tarball, sharing layers"""
        pass

    @abstractmethod
    def save_name(self, image: str) -> str:
        """
        Flattened reference used when saving an image

        Args:
            image: Source image reference

        Returns:
            Reference under the local registry domain
        """
        pass


class RemoteFileFetcher(ABC):
    """Downloads legacy build artifacts from a remote file server"""

    @abstractmethod
    async def connect(self, source: SlugSource) -> None:
        pass

    @abstractmethod
    async def download(self, remote_path: str, local_path: Path) -> None:
        """
        Download one file

        Raises:
            ArtifactTransferError: If the transfer failed
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class StatusStore(ABC):
    """Persists the status of export tasks"""

    @abstractmethod
    async def get_by_task_id(self, task_id: str) -> Dict[str, Any]:
        """
        Get the status record of a task

        Raises:
            StatusPersistError: If the record does not exist or cannot be read
        """
        pass

    @abstractmethod
    async def update(self, record: Dict[str, Any]) -> None:
        """
        Store a status record, keyed by its event_id

        Raises:
            StatusPersistError: If the record cannot be written
        """
        pass


class EventLogger(ABC):
    """User-facing progress events of one task"""

    @abstractmethod
    def info(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def error(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        pass


class Archiver(ABC):
    """Packs a workspace into one file"""

    @abstractmethod
    async def zip(self, source_dir: Path, destination: Path) -> Path:
        """
        Compress a directory

        Args:
            source_dir: Directory to compress
            destination: Archive path

        Returns:
            Path of the created archive

        Raises:
            ArchivalError: If compression failed
        """
        pass
