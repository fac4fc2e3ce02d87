"""Environment and volume resolution across component dependencies"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..api.exceptions import VolumeBindingUnresolved
from ..constants import (
    DEFAULT_MEMORY_LABEL,
    GENERATED_TOKEN_LENGTH,
    MEMORY_ENV_KEY,
    MEMORY_LABELS,
    PORT_ENV_KEY,
)
from ..models.config import ExportConfig
from ..models.manifest import Component, VolumeMount
from ..utils.template_utils import substitute_variables
from .name_sanitizer import ServiceNameRegistry

logger = logging.getLogger(__name__)


def memory_label(memory: int) -> str:
    """Memory class label for a memory allocation in MiB"""
    return MEMORY_LABELS.get(memory, DEFAULT_MEMORY_LABEL)


def generate_token() -> str:
    return uuid.uuid4().hex[:GENERATED_TOKEN_LENGTH]


@dataclass
class ResolvedComponent:
    """A component with its final environment and volume binds"""
    share_id: str
    name: str
    component: Component
    environment: Dict[str, str] = field(default_factory=dict)
    volumes: List[str] = field(default_factory=list)
    depends_on: List[str] = field(default_factory=list)
    config_files: List[VolumeMount] = field(default_factory=list)


@dataclass
class Resolution:
    """Result of resolving every component of a manifest"""
    components: Dict[str, ResolvedComponent] = field(default_factory=dict)
    global_volumes: List[str] = field(default_factory=list)
    warnings: List[VolumeBindingUnresolved] = field(default_factory=list)

    def get(self, share_id: str) -> Optional[ResolvedComponent]:
        return self.components.get(share_id)

    def __iter__(self):
        return iter(self.components.values())

    def __len__(self) -> int:
        return len(self.components)


class DependencyResolver:
    """Computes resolved environment and volumes per component"""

    def __init__(self,
                 config: Optional[ExportConfig] = None,
                 token_factory: Callable[[], str] = generate_token):
        """Initialize dependency resolver

        Args:
            config: Export configuration
            token_factory: Produces replacement values for placeholders
        """
        self.config = config or ExportConfig()
        self.token_factory = token_factory

    def resolve(self,
                components: List[Component],
                registry: ServiceNameRegistry) -> Resolution:
        """Resolve all components in manifest order

        Never raises for missing data; unresolvable items are skipped
        and reported on the result.

        Args:
            components: Components in manifest order
            registry: Unique sanitized names keyed by share id

        Returns:
            Resolution with ordered components, named volumes and warnings
        """
        by_share_id = {c.share_id: c for c in components}
        resolution = Resolution()
        volume_sources = self._volume_sources(components, registry)

        for component in components:
            name = registry.get(component.share_id)
            if name is None:
                logger.warning(f"component {component.name} has no registered name, skipped")
                continue

            resolved = ResolvedComponent(
                share_id=component.share_id,
                name=name,
                component=component,
                environment=self._resolve_environment(component, by_share_id),
            )
            self._resolve_volumes(resolved, volume_sources, resolution)
            self._resolve_depends_on(resolved, registry)
            resolution.components[component.share_id] = resolved

        return resolution

    def _resolve_environment(self,
                             component: Component,
                             by_share_id: Dict[str, Component]) -> Dict[str, str]:
        envs: Dict[str, str] = {MEMORY_ENV_KEY: memory_label(component.memory)}
        if component.ports:
            envs[PORT_ENV_KEY] = str(component.ports[0])

        placeholder = self.config.env_placeholder
        for key, value in component.private_env.items():
            if value == placeholder:
                value = self.token_factory()
            envs[key] = value

        envs.update(component.public_env)

        imported: Dict[str, str] = {}
        for edge in component.dependencies:
            if not edge.imports_environment:
                continue
            target = by_share_id.get(edge.target)
            if target is None:
                logger.debug(f"dependency {edge.target} of {component.name} is not in the manifest")
                continue
            imported.update(target.public_env)

        # A component's own private/public entries are never overridden
        own_keys = set(component.private_env) | set(component.public_env)
        for key, value in imported.items():
            if key not in own_keys:
                envs[key] = value

        return substitute_variables(envs)

    def _volume_sources(self,
                        components: List[Component],
                        registry: ServiceNameRegistry) -> Dict[Tuple[str, str], str]:
        """Left side of every volume bind keyed by (share id, volume name)"""
        sources = {}
        for component in components:
            name = registry.get(component.share_id)
            if name is None:
                continue
            for volume in component.volumes:
                if volume.is_config_file:
                    source = f"./{name}/{volume.relative_mount_path}"
                else:
                    source = f"{name}_{volume.name}"
                sources[(component.share_id, volume.name)] = source
        return sources

    def _resolve_volumes(self,
                         resolved: ResolvedComponent,
                         volume_sources: Dict[Tuple[str, str], str],
                         resolution: Resolution) -> None:
        component = resolved.component

        for volume in component.volumes:
            source = volume_sources[(component.share_id, volume.name)]
            resolved.volumes.append(f"{source}:{volume.mount_path}")
            if volume.is_config_file:
                resolved.config_files.append(volume)
            elif source not in resolution.global_volumes:
                resolution.global_volumes.append(source)

        for edge in component.dependencies:
            if not edge.binds_volume:
                continue
            source = volume_sources.get((edge.target, edge.volume_name))
            if source is None or not edge.mount_path:
                unresolved = VolumeBindingUnresolved(
                    component=resolved.name,
                    target=edge.target,
                    volume_name=edge.volume_name,
                    mount_path=edge.mount_path,
                )
                logger.warning(str(unresolved))
                resolution.warnings.append(unresolved)
                continue
            resolved.volumes.append(f"{source}:{edge.mount_path}")

    def _resolve_depends_on(self,
                            resolved: ResolvedComponent,
                            registry: ServiceNameRegistry) -> None:
        for edge in resolved.component.dependencies:
            if not edge.imports_environment:
                continue
            target_name = registry.get(edge.target)
            if target_name is None:
                continue
            if target_name not in resolved.depends_on:
                resolved.depends_on.append(target_name)
