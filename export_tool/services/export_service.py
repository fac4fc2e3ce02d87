# export_tool/services/export_service.py
"""Export service implementation"""

import asyncio
import logging
import shutil
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiofiles

from ..api.exceptions import (
    ArchivalError,
    ArtifactTransferError,
    ExportToolError,
    ImageOperationError,
    StatusPersistError,
    UnsupportedFormatError,
    WorkspaceError,
)
from ..collaborators import Collaborators, EventLogger, LoggingEventLogger
from ..constants import ExportFormat
from ..core import (
    ComposeBuilder,
    DependencyResolver,
    LegacyAppSource,
    ManifestReader,
    PathResolver,
    Resolution,
    ServiceNameRegistry,
    StructuredManifestSource,
    flatten_file_name,
    sanitize,
    to_identifier,
)
from ..models import ExportConfig, ExportResult, ExportState, ExportTask, ImageCredentials, VolumeMount
from ..models.manifest import LegacyApp
from ..templates import START_SCRIPT_TEMPLATE, get_template_path
from ..utils.file_utils import ensure_directory, ensure_parent_dir
from ..utils.hash_utils import verify_checksum_file, write_checksum_file
from ..utils.template_utils import copy_template

logger = logging.getLogger(__name__)


class ExportService:
    """Runs one export task through the export state machine"""

    def __init__(self,
                 collaborators: Collaborators,
                 config: Optional[ExportConfig] = None):
        """
        Initialize export service

        Args:
            collaborators: Image service, status store, archiver and friends
            config: Export configuration
        """
        self.collaborators = collaborators
        self.config = config or ExportConfig()

    async def run(self, task: ExportTask) -> ExportResult:
        """
        Execute the export workflow

        Failures never propagate: they move the task to FAILED and are
        reported on the result.

        Args:
            task: Freshly created export task

        Returns:
            ExportResult: Export result
        """
        if task.state != ExportState.CREATED:
            raise RuntimeError(f"Task {task.event_id} was already run")

        start_time = time.time()
        workspace = Path(task.source_dir).absolute()
        paths = PathResolver(workspace)
        events = self.collaborators.events or LoggingEventLogger(task.event_id)
        warnings: List[str] = []
        metadata: Dict[str, Any] = {}
        cached = False
        error: Optional[ExportToolError] = None

        try:
            export_format = self._validate_format(task.format)

            self._transition(task, ExportState.CHECKING_FRESHNESS)
            if await self.is_latest(paths):
                cached = True
            else:
                self._transition(task, ExportState.CLEANING_WORKSPACE)
                await self.clean_workspace(paths)

                self._transition(task, ExportState.STAGING_ARTIFACTS)
                if export_format == ExportFormat.PLATFORM_NATIVE:
                    metadata.update(await self._stage_platform_native(paths, events))
                else:
                    resolution, image_names = await self._stage_compose(paths, events)
                    warnings.extend(str(w) for w in resolution.warnings)
                    metadata['components'] = len(resolution)
                    metadata['images'] = len(set(image_names.values()))

                    self._transition(task, ExportState.GENERATING_DESCRIPTOR)
                    await self._generate_descriptor(paths, resolution, image_names, events)

                self._transition(task, ExportState.ARCHIVING)
                await self._archive(paths, events)
                events.info("Export application success", {"step": "export-app", "status": "success"})

            self._transition(task, ExportState.SUCCEEDED)

        except ExportToolError as e:
            error = e
            logger.error(f"Export {task.event_id} failed: {e}")
            self._transition(task, ExportState.FAILED)

        except Exception as e:
            logger.exception(f"Unexpected error while exporting {task.event_id}")
            error = ExportToolError(f"Unexpected error: {e}")
            self._transition(task, ExportState.FAILED)

        status_persisted = await self._update_status(task)

        return ExportResult(
            success=task.state == ExportState.SUCCEEDED,
            event_id=task.event_id,
            format=task.format,
            state=task.state,
            archive_path=str(paths.get_archive_path()) if task.state == ExportState.SUCCEEDED else None,
            cached=cached,
            status_persisted=status_persisted,
            error=str(error) if error else None,
            error_code=error.error_code if error else None,
            duration=time.time() - start_time,
            warnings=warnings,
            metadata=metadata,
        )

    def _validate_format(self, export_format: str) -> ExportFormat:
        try:
            return ExportFormat(export_format)
        except ValueError:
            raise UnsupportedFormatError(export_format) from None

    def _transition(self, task: ExportTask, state: ExportState) -> None:
        previous = task.state
        task.transition(state)
        logger.debug(f"Export {task.event_id}: {previous.value} -> {state.value}")

    async def _update_status(self, task: ExportTask) -> bool:
        """Report the terminal status; failures are logged, not raised"""
        store = self.collaborators.status_store
        try:
            record = await store.get_by_task_id(task.event_id)
            record['status'] = task.status.value
            await store.update(record)
        except StatusPersistError as e:
            logger.error(str(e))
            return False
        except Exception as e:
            logger.error(str(StatusPersistError(task.event_id, str(e))))
            return False

        logger.debug(f"Updated status of {task.event_id} to {task.status.value}")
        return True

    async def is_latest(self, paths: PathResolver) -> bool:
        """
        Check whether the previous export is still up to date

        Args:
            paths: Workspace paths

        Returns:
            True if the checksum sidecar validates and the archive exists
        """
        checksum_path = paths.get_checksum_path()
        if not checksum_path.exists():
            logger.debug(f"The export app md5 file is not found: {checksum_path}")
            return False

        if not await verify_checksum_file(checksum_path):
            logger.info("The export app archive is not latest.")
            return False

        if not paths.get_archive_path().exists():
            logger.debug("The export app archive is not found.")
            return False

        logger.info("The export app archive is latest.")
        return True

    async def clean_workspace(self, paths: PathResolver) -> None:
        """Empty the workspace, keeping only the manifest"""
        logger.debug("Ready clean the source directory.")
        content = await ManifestReader(paths.workspace).read_raw()

        try:
            await asyncio.to_thread(shutil.rmtree, paths.workspace)
            ensure_directory(paths.workspace)
            async with aiofiles.open(paths.get_metadata_path(), 'wb') as f:
                await f.write(content)
        except OSError as e:
            raise WorkspaceError(f"Failed to clean workspace {paths.workspace}: {e}") from e

    async def _write_config_files(self, directory: Path, volumes: List[VolumeMount], paths: PathResolver) -> None:
        for volume in volumes:
            target = paths.get_config_file_path(directory, volume.mount_path)
            try:
                ensure_parent_dir(target)
                async with aiofiles.open(target, 'w', encoding='utf-8') as f:
                    await f.write(volume.file_content)
            except OSError as e:
                raise WorkspaceError(f"Failed to write config file {target}: {e}") from e
            logger.debug(f"Wrote config file {target}")

    async def _transfer_image(self, image: str, credentials: Optional[ImageCredentials]) -> str:
        """Pull an image and tag it with its flattened name"""
        images = self.collaborators.images
        await images.pull(image, credentials, attempts=self.config.images.pull_attempts)
        save_name = images.save_name(image)
        await images.tag(image, save_name, attempts=self.config.images.tag_attempts)
        return save_name

    async def _export_image(self,
                            directory: Path,
                            image: str,
                            credentials: Optional[ImageCredentials],
                            paths: PathResolver,
                            events: EventLogger,
                            step: str = "save-image") -> Path:
        tarball = paths.get_image_tarball_path(directory, flatten_file_name(image))
        try:
            save_name = await self._transfer_image(image, credentials)
            await self.collaborators.images.save(save_name, tarball)
        except ImageOperationError:
            events.error(f"save image to local error: {image}", {"step": step, "status": "failure"})
            raise

        logger.debug(f"Successful save image file: {image}")
        return tarball

    def _is_runner_image(self, image: str) -> bool:
        return self.config.images.runner_image in image

    def _directory_name(self, name: str) -> str:
        directory = sanitize(name).replace('/', '_')
        return directory or to_identifier(name)

    async def _export_slug(self, directory: Path, app: LegacyApp, events: EventLogger) -> Path:
        """Copy the build artifact of a legacy app, downloading it if needed"""
        slug_path = app.slug_path
        destination = directory / flatten_file_name(slug_path)

        if Path(slug_path).is_file():
            try:
                await asyncio.to_thread(shutil.copyfile, slug_path, destination)
                logger.debug(f"The slug file was exist already, copied to {destination}")
                return destination
            except OSError as e:
                logger.debug(f"Failed to copy the slug file {slug_path}: {e}")

        fetcher = self.collaborators.fetcher
        if fetcher is None:
            raise ArtifactTransferError(f"No remote fetcher available to download {slug_path}")

        events.info(f"Download service {app.name} slug file", {"step": "get-slug", "status": "starting"})
        await fetcher.connect(app.slug_source)
        try:
            await fetcher.download(slug_path, destination)
        finally:
            await fetcher.close()

        logger.debug(f"Successful download slug file: {slug_path}")
        return destination

    async def _stage_platform_native(self, paths: PathResolver, events: EventLogger) -> Dict[str, Any]:
        reader = ManifestReader(paths.workspace)
        apps = await reader.read_legacy_apps()
        source = LegacyAppSource(apps)
        events.info("Start export app", {"step": "export-app", "status": "success"})

        images = 0
        slugs = 0
        for app, component in zip(apps, source.components()):
            directory = ensure_directory(paths.get_component_dir(self._directory_name(app.name)))
            logger.debug(f"Create directory for export app: {directory}")

            await self._write_config_files(directory, component.config_files, paths)

            if app.share_image and self._is_runner_image(app.share_image):
                logger.debug(f"Skip the runner image: {app.share_image}")
            elif app.share_image:
                logger.info(f"The service is image model deploy: {app.name}")
                await self._export_image(directory, app.share_image, app.credentials, paths, events)
                images += 1
                continue

            if app.slug_path:
                await self._export_slug(directory, app, events)
                slugs += 1

        plugins = await reader.read_plugins()
        if plugins:
            events.info("Parsing plugin information", {"step": "export-plugins", "status": "success"})
        for plugin in plugins:
            if not plugin.image:
                logger.warning(f"Plugin {plugin.name} has no image, skipped")
                continue
            directory = ensure_directory(paths.get_component_dir(self._directory_name(plugin.name)))
            await self._export_image(directory, plugin.image, plugin.credentials, paths, events,
                                     step="save-plugin-image")
            images += 1

        return {'components': len(apps), 'plugins': len(plugins), 'images': images, 'slugs': slugs}

    async def _stage_compose(self,
                             paths: PathResolver,
                             events: EventLogger) -> Tuple[Resolution, Dict[str, str]]:
        manifest = await ManifestReader(paths.workspace).read_structured_manifest()
        components = StructuredManifestSource(manifest).components()
        events.info(f"Start export app {manifest.app_name}", {"step": "export-app", "status": "success"})

        registry = ServiceNameRegistry.build(components)
        resolution = DependencyResolver(self.config).resolve(components, registry)

        image_names: Dict[str, str] = {}
        for resolved in resolution:
            directory = ensure_directory(paths.get_component_dir(resolved.name))
            logger.debug(f"Create directory for export app: {directory}")
            await self._write_config_files(directory, resolved.config_files, paths)

            component = resolved.component
            if not component.has_image:
                logger.warning(f"Component {resolved.name} has no image")
                continue
            try:
                image_names[resolved.share_id] = await self._transfer_image(
                    component.image, component.credentials)
            except ImageOperationError:
                events.error(f"Pull image {component.image} failure", {"step": "pull-image", "status": "failure"})
                raise

        save_names = list(dict.fromkeys(image_names.values()))
        if save_names:
            try:
                await self.collaborators.images.multi_save(save_names, paths.get_component_images_path())
            except ImageOperationError:
                events.error("Save image file failure", {"step": "save-image", "status": "failure"})
                raise

        return resolution, image_names

    async def _generate_descriptor(self,
                                   paths: PathResolver,
                                   resolution: Resolution,
                                   image_names: Dict[str, str],
                                   events: EventLogger) -> None:
        events.info("Start create docker compose app metadata file", {"step": "build-yaml", "status": "starting"})
        descriptor = ComposeBuilder(self.config.compose).build(resolution, image_names)

        compose_path = paths.get_compose_path()
        try:
            async with aiofiles.open(compose_path, 'w', encoding='utf-8') as f:
                await f.write(descriptor.to_yaml())
        except OSError as e:
            events.error(f"Create docker compose app metadata file failure: {e}",
                         {"step": "create-yaml", "status": "failure"})
            raise WorkspaceError(f"Failed to write {compose_path}: {e}") from e
        events.info("Create docker compose app metadata file success", {"step": "build-yaml", "status": "success"})

        if self.config.compose.start_script:
            template = Path(self.config.compose.start_script).expanduser()
        else:
            template = get_template_path("compose", START_SCRIPT_TEMPLATE)
        if template is None:
            raise WorkspaceError(f"Start script template {START_SCRIPT_TEMPLATE} is missing")
        try:
            script = copy_template(template, paths.get_start_script_path())
            script.chmod(0o755)
        except OSError as e:
            raise WorkspaceError(f"Failed to generate start script to {paths.workspace}: {e}") from e
        logger.debug(f"Successful generate start script to: {paths.workspace}")

    async def _archive(self, paths: PathResolver, events: EventLogger) -> None:
        archive_path = paths.get_archive_path()
        try:
            await self.collaborators.archiver.zip(paths.workspace, archive_path)
        except ArchivalError:
            events.error("Export application failure: Zip failure", {"step": "export-app", "status": "failure"})
            raise

        try:
            await write_checksum_file(paths.get_metadata_path(), paths.get_checksum_path())
        except OSError as e:
            raise ArchivalError(f"Failed to create md5 file: {e}") from e
