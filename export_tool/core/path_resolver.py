"""Path resolution module for export workspaces"""

from pathlib import Path
from typing import Union

from ..api.exceptions import WorkspaceError
from ..constants import (
    ARCHIVE_SUFFIX,
    CHECKSUM_SUFFIX,
    COMPONENT_IMAGES_FILE,
    COMPOSE_FILE,
    IMAGE_TARBALL_PATTERN,
    METADATA_FILE,
    START_SCRIPT,
)


class PathResolver:
    """Resolves paths within one export workspace"""

    def __init__(self, workspace: Union[str, Path]):
        """Initialize path resolver

        Args:
            workspace: Export workspace (source) directory
        """
        self.workspace = Path(workspace)

    def get_metadata_path(self) -> Path:
        return self.workspace / METADATA_FILE

    def get_checksum_path(self) -> Path:
        return self.workspace / (METADATA_FILE + CHECKSUM_SUFFIX)

    def get_archive_path(self) -> Path:
        """Archive sits next to the workspace, named after it"""
        return Path(str(self.workspace) + ARCHIVE_SUFFIX)

    def get_component_dir(self, name: str) -> Path:
        return self.workspace / name

    def get_compose_path(self) -> Path:
        return self.workspace / COMPOSE_FILE

    def get_start_script_path(self) -> Path:
        return self.workspace / START_SCRIPT

    def get_component_images_path(self) -> Path:
        return self.workspace / COMPONENT_IMAGES_FILE

    def get_image_tarball_path(self, directory: Path, file_name: str) -> Path:
        return directory / IMAGE_TARBALL_PATTERN.format(name=file_name)

    def get_config_file_path(self, directory: Path, mount_path: str) -> Path:
        """
        Config file is materialized at <component dir>/<mount path>

        Raises:
            WorkspaceError: If the mount path leaves the component directory
        """
        target = directory / mount_path.lstrip('/')
        root = directory.resolve()
        resolved = target.resolve()
        if resolved == root or not resolved.is_relative_to(root):
            raise WorkspaceError(f"Config file path {mount_path!r} escapes {directory}")
        return target
