# export_tool/models/manifest.py
"""Application manifest models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any

from ..constants import VolumeType


def _text(value: Any) -> str:
    """Coerce a loosely-typed JSON value to a string"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _integer(value: Any) -> int:
    """Coerce a loosely-typed JSON value to an int, 0 when impossible"""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _records(value: Any) -> List[Dict[str, Any]]:
    """Keep only the dict entries of a JSON array"""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _env_map(value: Any) -> Dict[str, str]:
    """Convert an attr_name/attr_value list into an ordered mapping"""
    envs = {}
    for item in _records(value):
        key = _text(item.get('attr_name'))
        if not key:
            continue
        envs[key] = _text(item.get('attr_value'))
    return envs


@dataclass(frozen=True)
class ImageCredentials:
    """Registry credentials attached to an image reference"""
    user: str = ""
    password: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.user

    @classmethod
    def from_dict(cls, data: Any) -> 'ImageCredentials':
        if not isinstance(data, dict):
            return cls()
        return cls(user=_text(data.get('hub_user')), password=_text(data.get('hub_password')))


@dataclass
class VolumeMount:
    """Volume declared by a component"""
    name: str
    mount_path: str
    volume_type: str = VolumeType.REGULAR.value
    file_content: str = ""

    @property
    def is_config_file(self) -> bool:
        return self.volume_type == VolumeType.CONFIG_FILE.value

    @property
    def relative_mount_path(self) -> str:
        """Mount path without its leading slash"""
        return self.mount_path.lstrip('/')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VolumeMount':
        return cls(
            name=_text(data.get('volume_name')),
            mount_path=_text(data.get('volume_path')),
            volume_type=_text(data.get('volume_type')) or VolumeType.REGULAR.value,
            file_content=_text(data.get('file_content')),
        )


class EdgeKind(Enum):
    """How a dependency edge is used"""
    SERVICE = "service"  # imports public env, orders startup
    MOUNT = "mount"  # binds a volume of the target


@dataclass(frozen=True)
class DependencyEdge:
    """Directed relation from a component to another component's share id"""
    target: str
    kind: EdgeKind = EdgeKind.SERVICE
    volume_name: Optional[str] = None
    mount_path: Optional[str] = None

    @property
    def binds_volume(self) -> bool:
        return self.kind == EdgeKind.MOUNT

    @property
    def imports_environment(self) -> bool:
        return self.kind == EdgeKind.SERVICE


@dataclass
class Component:
    """One deployable unit of an application"""
    name: str
    share_id: str
    image: str = ""
    credentials: ImageCredentials = field(default_factory=ImageCredentials)
    memory: int = 0
    ports: List[int] = field(default_factory=list)
    volumes: List[VolumeMount] = field(default_factory=list)
    dependencies: List[DependencyEdge] = field(default_factory=list)
    private_env: Dict[str, str] = field(default_factory=dict)
    public_env: Dict[str, str] = field(default_factory=dict)
    command: str = ""

    @property
    def has_image(self) -> bool:
        return bool(self.image)

    @property
    def config_files(self) -> List[VolumeMount]:
        return [v for v in self.volumes if v.is_config_file]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Component':
        """Create from a component (or legacy app) record"""
        dependencies = [
            DependencyEdge(target=_text(item.get('dep_service_key')))
            for item in _records(data.get('dep_service_map_list'))
            if item.get('dep_service_key')
        ]
        for item in _records(data.get('mnt_relation_list')):
            dependencies.append(DependencyEdge(
                target=_text(item.get('service_share_uuid')),
                kind=EdgeKind.MOUNT,
                volume_name=_text(item.get('mnt_name')),
                mount_path=_text(item.get('mnt_dir')),
            ))

        ports = []
        for item in _records(data.get('port_map_list')):
            port = _integer(item.get('container_port'))
            if port:
                ports.append(port)

        return cls(
            name=_text(data.get('service_cname')),
            share_id=_text(data.get('service_share_uuid')),
            image=_text(data.get('share_image')),
            credentials=ImageCredentials.from_dict(data.get('service_image')),
            memory=_integer(data.get('memory')),
            ports=ports,
            volumes=[VolumeMount.from_dict(v) for v in _records(data.get('service_volume_map_list'))],
            dependencies=dependencies,
            private_env=_env_map(data.get('service_env_map_list')),
            public_env=_env_map(data.get('service_connect_info_map_list')),
            command=_text(data.get('cmd')),
        )


@dataclass
class ApplicationManifest:
    """Structured application manifest"""
    app_name: str
    components: List[Component] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApplicationManifest':
        return cls(
            app_name=_text(data.get('app_name')),
            components=[Component.from_dict(c) for c in _records(data.get('components'))],
        )


@dataclass(frozen=True)
class SlugSource:
    """Where a legacy build artifact can be downloaded from"""
    host: str = ""
    port: str = ""
    username: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> 'SlugSource':
        if not isinstance(data, dict):
            return cls()
        return cls(
            host=_text(data.get('ftp_host')),
            port=_text(data.get('ftp_port')),
            username=_text(data.get('ftp_username')),
            password=_text(data.get('ftp_password')),
        )


@dataclass
class LegacyApp:
    """Loosely-typed app record of the platform-native manifest"""
    raw: Dict[str, Any]

    @property
    def name(self) -> str:
        return _text(self.raw.get('service_cname'))

    @property
    def share_image(self) -> str:
        return _text(self.raw.get('share_image'))

    @property
    def credentials(self) -> ImageCredentials:
        return ImageCredentials.from_dict(self.raw.get('service_image'))

    @property
    def slug_path(self) -> str:
        return _text(self.raw.get('share_slug_path'))

    @property
    def slug_source(self) -> SlugSource:
        return SlugSource.from_dict(self.raw.get('service_slug'))

    def to_component(self) -> Component:
        return Component.from_dict(self.raw)


@dataclass
class PluginRecord:
    """Plugin declared by the platform-native manifest"""
    name: str
    image: str
    credentials: ImageCredentials = field(default_factory=ImageCredentials)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PluginRecord':
        return cls(
            name=_text(data.get('plugin_name')),
            image=_text(data.get('share_image')),
            credentials=ImageCredentials.from_dict(data.get('plugin_image')),
        )
