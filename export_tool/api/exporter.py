"""Exporter API for export operations"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..collaborators import (
    Collaborators,
    DockerCliImageService,
    SftpFileFetcher,
    JsonFileStatusStore,
    LoggingEventLogger,
    ZipArchiver,
)
from ..constants import TaskStatus
from ..core import (
    ComposeBuilder,
    DependencyResolver,
    ManifestReader,
    ServiceNameRegistry,
    StructuredManifestSource,
)
from ..models import ComposeDescriptor, ExportConfig, ExportResult, ExportTask
from ..services import ExportService
from ..utils.async_utils import run_async
from .exceptions import StatusPersistError

logger = logging.getLogger(__name__)


class Exporter:
    """Exporter class for export operations"""

    def __init__(self,
                 config: Optional[ExportConfig] = None,
                 collaborators: Optional[Collaborators] = None):
        """
        Initialize exporter

        Args:
            config: Export configuration, loaded from file/environment when omitted
            collaborators: Collaborators, docker/zip/JSON status file when omitted
        """
        self.config = config or ExportConfig.load()
        self.collaborators = collaborators or Collaborators(
            images=DockerCliImageService(self.config.images),
            status_store=JsonFileStatusStore(self.config.status_file),
            archiver=ZipArchiver(),
            fetcher=SftpFileFetcher(),
        )

    def export(self,
               event_id: str,
               export_format: str,
               source_dir: Union[str, Path],
               register: bool = True) -> ExportResult:
        """
        Export a workspace

        Args:
            event_id: Task identifier
            export_format: rainbond-app or docker-compose
            source_dir: Workspace directory holding metadata.json
            register: Create a running status record when none exists

        Returns:
            ExportResult: Export result
        """
        task = ExportTask(event_id=event_id, format=export_format, source_dir=Path(source_dir))
        return run_async(self._async_export(task, register))

    async def _async_export(self, task: ExportTask, register: bool) -> ExportResult:
        if register:
            await self._register(task)

        collaborators = self.collaborators
        if collaborators.events is None:
            collaborators = Collaborators(
                images=collaborators.images,
                status_store=collaborators.status_store,
                archiver=collaborators.archiver,
                fetcher=collaborators.fetcher,
                events=LoggingEventLogger(task.event_id),
            )

        service = ExportService(collaborators, self.config)
        return await service.run(task)

    async def _register(self, task: ExportTask) -> None:
        store = self.collaborators.status_store
        try:
            await store.get_by_task_id(task.event_id)
            return
        except StatusPersistError:
            pass

        record = task.to_dict()
        record['status'] = TaskStatus.RUNNING.value
        try:
            await store.update(record)
        except StatusPersistError as e:
            logger.warning(f"Could not register task {task.event_id}: {e}")

    def render_compose(self, source_dir: Union[str, Path]) -> ComposeDescriptor:
        """
        Build the compose descriptor of a workspace without touching images

        Args:
            source_dir: Workspace directory

        Returns:
            ComposeDescriptor
        """
        return run_async(self._async_render_compose(Path(source_dir)))

    async def _async_render_compose(self, source_dir: Path) -> ComposeDescriptor:
        manifest = await ManifestReader(source_dir).read_structured_manifest()
        components = StructuredManifestSource(manifest).components()
        registry = ServiceNameRegistry.build(components)
        resolution = DependencyResolver(self.config).resolve(components, registry)

        images = self.collaborators.images
        image_names = {
            c.share_id: images.save_name(c.image)
            for c in components if c.has_image
        }
        return ComposeBuilder(self.config.compose).build(resolution, image_names)

    def status(self, event_id: str) -> Dict[str, Any]:
        """
        Get the persisted status record of a task

        Raises:
            StatusPersistError: If there is no record
        """
        return run_async(self.collaborators.status_store.get_by_task_id(event_id))


# Convenience function
def export(event_id: str,
           export_format: str,
           source_dir: Union[str, Path],
           **options) -> ExportResult:
    """
    Export a workspace (convenience function)

    Args:
        event_id: Task identifier
        export_format: rainbond-app or docker-compose
        source_dir: Workspace directory
        **options: Options
            - config: ExportConfig or path of a YAML configuration file
            - register: Create a status record when none exists

    Returns:
        ExportResult: Export result
    """
    config = options.get('config')
    if config is None or isinstance(config, (str, Path)):
        config = ExportConfig.load(config)

    exporter = Exporter(config)
    return exporter.export(event_id, export_format, source_dir, register=options.get('register', True))
