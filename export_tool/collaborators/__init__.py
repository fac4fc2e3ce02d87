# export_tool/collaborators/__init__.py
"""Services an export depends on, with their shipped implementations"""

from dataclasses import dataclass, field
from typing import Optional

from .base import (
    Archiver,
    EventLogger,
    ImageService,
    RemoteFileFetcher,
    StatusStore,
)
from .archiver import ZipArchiver
from .docker_images import DockerCliImageService, flatten_image_name, split_image_reference
from .event_logger import LoggingEventLogger
from .sftp_fetcher import SftpFileFetcher
from .status_store import InMemoryStatusStore, JsonFileStatusStore


@dataclass
class Collaborators:
    """Bundle of collaborators handed to the export service"""
    images: ImageService
    status_store: StatusStore
    archiver: Archiver = field(default_factory=ZipArchiver)
    fetcher: Optional[RemoteFileFetcher] = None
    events: Optional[EventLogger] = None


__all__ = [
    "Archiver",
    "EventLogger",
    "ImageService",
    "RemoteFileFetcher",
    "StatusStore",
    "ZipArchiver",
    "DockerCliImageService",
    "flatten_image_name",
    "split_image_reference",
    "LoggingEventLogger",
    "SftpFileFetcher",
    "InMemoryStatusStore",
    "JsonFileStatusStore",
    "Collaborators",
]
