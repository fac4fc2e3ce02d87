"""Manifest reader for export workspaces"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Union

import aiofiles

from ..api.exceptions import ManifestMalformedError, ManifestUnavailableError
from ..models.manifest import ApplicationManifest, Component, LegacyApp, PluginRecord
from .path_resolver import PathResolver

logger = logging.getLogger(__name__)


class ManifestReader:
    """Reads metadata.json of a workspace in either of its two shapes"""

    def __init__(self, workspace: Union[str, Path]):
        """Initialize manifest reader

        Args:
            workspace: Export workspace directory
        """
        self.paths = PathResolver(workspace)

    @property
    def manifest_path(self) -> Path:
        return self.paths.get_metadata_path()

    async def read_raw(self) -> bytes:
        """Read the manifest bytes

        Returns:
            File content

        Raises:
            ManifestUnavailableError: If the file is missing or unreadable
        """
        path = self.manifest_path
        if not path.is_file():
            raise ManifestUnavailableError(str(path), "file not found")

        try:
            async with aiofiles.open(path, 'rb') as f:
                return await f.read()
        except OSError as e:
            raise ManifestUnavailableError(str(path), str(e)) from e

    async def _read_document(self) -> Dict[str, Any]:
        content = await self.read_raw()
        try:
            data = json.loads(content.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestMalformedError(f"Failed to decode {self.manifest_path}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestMalformedError(f"{self.manifest_path} must contain a JSON object")
        return data

    async def read_legacy_apps(self) -> List[LegacyApp]:
        """Read the app records of a platform-native manifest

        Returns:
            App records in manifest order

        Raises:
            ManifestMalformedError: If there is no non-empty ``apps`` array
        """
        data = await self._read_document()
        apps = data.get('apps')
        if not isinstance(apps, list):
            raise ManifestMalformedError(f"Not found apps in the metadata: {self.manifest_path}")

        records = [LegacyApp(raw=app) for app in apps if isinstance(app, dict)]
        if not records:
            raise ManifestMalformedError(f"Not found apps in the metadata: {self.manifest_path}")

        logger.debug(f"Read {len(records)} legacy apps from {self.manifest_path}")
        return records

    async def read_plugins(self) -> List[PluginRecord]:
        """Read the plugin records of a platform-native manifest

        A manifest without plugins yields an empty list.
        """
        data = await self._read_document()
        plugins = data.get('plugins')
        if plugins is None:
            return []
        if not isinstance(plugins, list):
            raise ManifestMalformedError(f"plugins must be an array: {self.manifest_path}")

        return [PluginRecord.from_dict(p) for p in plugins if isinstance(p, dict)]

    async def read_structured_manifest(self) -> ApplicationManifest:
        """Read a structured application manifest

        Returns:
            Parsed manifest

        Raises:
            ManifestMalformedError: If components is not an array
        """
        data = await self._read_document()
        components = data.get('components')
        if components is not None and not isinstance(components, list):
            raise ManifestMalformedError(f"components must be an array: {self.manifest_path}")

        manifest = ApplicationManifest.from_dict(data)
        logger.debug(f"Read manifest of {manifest.app_name or 'unnamed app'} "
                     f"with {len(manifest.components)} components")
        return manifest


class ComponentSource(ABC):
    """Anything that yields the common component model"""

    @abstractmethod
    def components(self) -> List[Component]:
        """Components in manifest order"""
        pass


class LegacyAppSource(ComponentSource):
    """Adapter over loosely-typed legacy app records"""

    def __init__(self, apps: List[LegacyApp]):
        self.apps = apps

    def components(self) -> List[Component]:
        return [app.to_component() for app in self.apps]


class StructuredManifestSource(ComponentSource):
    """Adapter over a structured application manifest"""

    def __init__(self, manifest: ApplicationManifest):
        self.manifest = manifest

    def components(self) -> List[Component]:
        return list(self.manifest.components)
