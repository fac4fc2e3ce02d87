# export_tool/api/__init__.py
"""API layer for export-tool"""

from .exporter import Exporter, export
from .exceptions import (
    ExportToolError,
    ManifestError,
    ManifestUnavailableError,
    ManifestMalformedError,
    UnsupportedFormatError,
    ImageOperationError,
    ArtifactTransferError,
    ArchivalError,
    StatusPersistError,
    WorkspaceError,
    ConfigError,
    VolumeBindingUnresolved,
)

__all__ = [
    # Main classes
    "Exporter",

    # Convenience functions
    "export",

    # Exceptions
    "ExportToolError",
    "ManifestError",
    "ManifestUnavailableError",
    "ManifestMalformedError",
    "UnsupportedFormatError",
    "ImageOperationError",
    "ArtifactTransferError",
    "ArchivalError",
    "StatusPersistError",
    "WorkspaceError",
    "ConfigError",
    "VolumeBindingUnresolved",
]
