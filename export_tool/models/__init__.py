# export_tool/models/__init__.py
"""Data models for export-tool"""

from .manifest import (
    ApplicationManifest,
    Component,
    DependencyEdge,
    EdgeKind,
    ImageCredentials,
    LegacyApp,
    PluginRecord,
    SlugSource,
    VolumeMount,
)
from .compose import ComposeDescriptor, ComposeService, LoggingPolicy
from .task import ExportTask, ExportState, ExportResult
from .config import ExportConfig, ImageConfig, ComposeConfig

__all__ = [
    # Manifest models
    "ApplicationManifest",
    "Component",
    "DependencyEdge",
    "EdgeKind",
    "ImageCredentials",
    "LegacyApp",
    "PluginRecord",
    "SlugSource",
    "VolumeMount",

    # Compose models
    "ComposeDescriptor",
    "ComposeService",
    "LoggingPolicy",

    # Task models
    "ExportTask",
    "ExportState",
    "ExportResult",

    # Config models
    "ExportConfig",
    "ImageConfig",
    "ComposeConfig",
]
