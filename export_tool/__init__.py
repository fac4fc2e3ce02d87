"""Export Tool - Bundle applications for offline delivery.

Reads an application workspace (metadata.json), stages its images, config
files and build artifacts, and archives the result either in the
platform-native layout or as a docker-compose bundle.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.exporter import Exporter, export

# Services
from .services import ExportService, ConfigService

# Data models
from .models import (
    ApplicationManifest,
    Component,
    ComposeDescriptor,
    ExportConfig,
    ExportResult,
    ExportState,
    ExportTask,
)

# Exceptions
from .api.exceptions import (
    ExportToolError,
    ManifestError,
    ManifestUnavailableError,
    ManifestMalformedError,
    UnsupportedFormatError,
    ImageOperationError,
    ArtifactTransferError,
    ArchivalError,
    StatusPersistError,
    ConfigError,
    VolumeBindingUnresolved,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Exporter",
    "ExportService",
    "ConfigService",

    # Core API functions
    "export",

    # Data models
    "ApplicationManifest",
    "Component",
    "ComposeDescriptor",
    "ExportConfig",
    "ExportResult",
    "ExportState",
    "ExportTask",

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
    "ConfigError",
    "VolumeBindingUnresolved",
]
