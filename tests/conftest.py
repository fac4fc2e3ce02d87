"""Test configuration for export-tool."""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from export_tool.api.exceptions import ArtifactTransferError, ImageOperationError
from export_tool.collaborators import (
    Collaborators,
    ImageService,
    InMemoryStatusStore,
    LoggingEventLogger,
    RemoteFileFetcher,
    ZipArchiver,
    flatten_image_name,
)
from export_tool.models.config import ExportConfig


class FakeImageService(ImageService):
    """Records image operations and writes placeholder tarballs"""

    def __init__(self, failing: Optional[List[str]] = None):
        self.calls: List[tuple] = []
        self.failing = set(failing or [])

    def save_name(self, image: str) -> str:
        return flatten_image_name(image, "goodrain.me", "latest")

    async def pull(self, image, credentials=None, attempts=1):
        self.calls.append(('pull', image, attempts))
        if image in self.failing:
            raise ImageOperationError('pull', image, 'manifest unknown')

    async def tag(self, source, target, attempts=1):
        self.calls.append(('tag', source, target, attempts))

    async def save(self, image, destination):
        self.calls.append(('save', image, Path(destination)))
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        Path(destination).write_bytes(b"image:" + image.encode())

    async def multi_save(self, images, destination):
        self.calls.append(('multi_save', list(images), Path(destination)))
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        Path(destination).write_bytes("\n".join(images).encode())

    def operations(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]


class FakeFetcher(RemoteFileFetcher):
    """Serves files from an in-memory mapping"""

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self.files = dict(files or {})
        self.connected_to = []
        self.closed = 0

    async def connect(self, source):
        self.connected_to.append(source)

    async def download(self, remote_path, local_path):
        if remote_path not in self.files:
            raise ArtifactTransferError(f"Failed to download {remote_path}: not found")
        Path(local_path).write_bytes(self.files[remote_path])

    async def close(self):
        self.closed += 1


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def workspace(temp_dir):
    """Empty export workspace inside the temporary directory."""
    path = temp_dir / "myapp"
    path.mkdir()
    return path


def write_manifest(workspace: Path, data: Dict[str, Any]) -> Path:
    """Write metadata.json into a workspace."""
    manifest = workspace / "metadata.json"
    manifest.write_text(json.dumps(data, ensure_ascii=False), encoding='utf-8')
    return manifest


def env_list(**envs: str) -> List[Dict[str, str]]:
    return [{"attr_name": key, "attr_value": value} for key, value in envs.items()]


@pytest.fixture
def make_workspace(workspace):
    """Write a manifest into the workspace and return the workspace."""
    def _make(data: Dict[str, Any]) -> Path:
        write_manifest(workspace, data)
        return workspace
    return _make


@pytest.fixture
def structured_manifest():
    """Two components: web depends on db and binds its data volume."""
    return {
        "app_name": "demo",
        "components": [
            {
                "service_cname": "db",
                "service_share_uuid": "db-uuid",
                "share_image": "registry.example.com/library/mysql:5.7",
                "service_image": {"hub_user": "admin", "hub_password": "secret"},
                "memory": 512,
                "port_map_list": [{"container_port": 3306}],
                "service_volume_map_list": [
                    {"volume_name": "data", "volume_path": "/var/lib/data", "volume_type": "share-file"},
                ],
                "service_env_map_list": env_list(MYSQL_ROOT_PASSWORD="**None**"),
                "service_connect_info_map_list": env_list(DB_HOST="127.0.0.1", DB_PORT="3306"),
            },
            {
                "service_cname": "web",
                "service_share_uuid": "web-uuid",
                "share_image": "nginx",
                "memory": 128,
                "port_map_list": [{"container_port": 80}, {"container_port": 443}],
                "service_volume_map_list": [
                    {
                        "volume_name": "conf",
                        "volume_path": "/etc/nginx/conf.d/default.conf",
                        "volume_type": "config-file",
                        "file_content": "server { listen 80; }",
                    },
                ],
                "service_env_map_list": env_list(DSN="mysql://${DB_HOST}:${DB_PORT}/app"),
                "dep_service_map_list": [{"dep_service_key": "db-uuid"}],
                "mnt_relation_list": [
                    {"service_share_uuid": "db-uuid", "mnt_name": "data", "mnt_dir": "/mnt/a-data"},
                ],
                "cmd": "nginx -g 'daemon off;'",
            },
        ],
    }


@pytest.fixture
def legacy_manifest():
    """Platform-native manifest with an image app, a runner app and a plugin."""
    return {
        "apps": [
            {
                "service_cname": "2048\\u5e94\\u7528",
                "service_share_uuid": "game-uuid",
                "share_image": "goodrain.me/percona-mysql:5.5_latest",
                "service_image": {"hub_user": "", "hub_password": ""},
                "service_volume_map_list": [
                    {
                        "volume_name": "cfg",
                        "volume_path": "/app/config.ini",
                        "volume_type": "config-file",
                        "file_content": "[main]\nkey=value\n",
                    },
                ],
            },
            {
                "service_cname": "builder",
                "service_share_uuid": "builder-uuid",
                "share_image": "goodrain.me/runner",
                "share_slug_path": "/app_publish/builder/v1.0_20180207165207.tgz",
                "service_slug": {"ftp_host": "ftp.example.com", "ftp_port": "21",
                                 "ftp_username": "user", "ftp_password": "pass"},
            },
        ],
        "plugins": [
            {
                "plugin_name": "mesh",
                "share_image": "goodrain.me/mesh-plugin:v2",
                "plugin_image": {"hub_user": "u", "hub_password": "p"},
            },
        ],
    }


@pytest.fixture
def images():
    return FakeImageService()


@pytest.fixture
def fetcher():
    return FakeFetcher({"/app_publish/builder/v1.0_20180207165207.tgz": b"slug"})


@pytest.fixture
def status_store():
    return InMemoryStatusStore({
        "evt-1": {"event_id": "evt-1", "status": "running"},
        "evt-2": {"event_id": "evt-2", "status": "running"},
    })


@pytest.fixture
def events():
    return LoggingEventLogger("evt-1")


@pytest.fixture
def collaborators(images, status_store, fetcher, events):
    return Collaborators(
        images=images,
        status_store=status_store,
        archiver=ZipArchiver(),
        fetcher=fetcher,
        events=events,
    )


@pytest.fixture
def config():
    return ExportConfig()
