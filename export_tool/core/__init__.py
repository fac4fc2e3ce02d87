"""Core functionality for export-tool"""

from .name_sanitizer import (
    ServiceNameRegistry,
    flatten_file_name,
    is_valid_identifier,
    sanitize,
    to_identifier,
)
from .path_resolver import PathResolver
from .manifest_reader import (
    ComponentSource,
    LegacyAppSource,
    ManifestReader,
    StructuredManifestSource,
)
from .dependency_resolver import (
    DependencyResolver,
    Resolution,
    ResolvedComponent,
    memory_label,
)
from .compose_builder import ComposeBuilder

__all__ = [
    "ServiceNameRegistry",
    "flatten_file_name",
    "is_valid_identifier",
    "sanitize",
    "to_identifier",
    "PathResolver",
    "ComponentSource",
    "LegacyAppSource",
    "ManifestReader",
    "StructuredManifestSource",
    "DependencyResolver",
    "Resolution",
    "ResolvedComponent",
    "memory_label",
    "ComposeBuilder",
]
