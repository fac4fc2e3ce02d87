"""Unit tests for the shipped collaborators."""

import json
import os
import zipfile

import pytest

from export_tool.api.exceptions import (
    ArchivalError,
    ArtifactTransferError,
    ImageOperationError,
    StatusPersistError,
)
from export_tool.collaborators import (
    DockerCliImageService,
    InMemoryStatusStore,
    JsonFileStatusStore,
    LoggingEventLogger,
    SftpFileFetcher,
    ZipArchiver,
    flatten_image_name,
    split_image_reference,
)
from export_tool.collaborators import sftp_fetcher
from export_tool.models.config import ImageConfig
from export_tool.models.manifest import SlugSource


class TestImageNames:
    """Tests for image reference handling."""

    @pytest.mark.parametrize("image,expected", [
        ("nginx", ("nginx", "")),
        ("nginx:1.25", ("nginx", "1.25")),
        ("registry:5000/team/app", ("registry:5000/team/app", "")),
        ("registry:5000/team/app:v2", ("registry:5000/team/app", "v2")),
        ("repo/app@sha256:abc", ("repo/app", "")),
    ])
    def test_split(self, image, expected):
        assert split_image_reference(image) == expected

    @pytest.mark.parametrize("image,expected", [
        ("nginx", "goodrain.me/nginx:latest"),
        ("registry.example.com/library/mysql:5.7", "goodrain.me/mysql:5.7"),
        ("registry:5000/team/app", "goodrain.me/app:latest"),
    ])
    def test_flatten(self, image, expected):
        assert flatten_image_name(image, "goodrain.me", "latest") == expected

    def test_save_name_uses_configured_domain(self):
        service = DockerCliImageService(ImageConfig(registry_domain="hub.local"))

        assert service.save_name("a/b/c:1") == "hub.local/c:1"


@pytest.mark.asyncio
class TestDockerCliImageService:
    """Tests for docker command failures."""

    async def test_missing_binary(self):
        service = DockerCliImageService(ImageConfig(docker_binary="/nonexistent/docker", retry_delay=0))

        with pytest.raises(ImageOperationError):
            await service.tag("a", "b", attempts=2)

    async def test_multi_save_without_images_is_noop(self, temp_dir):
        service = DockerCliImageService(ImageConfig(docker_binary="/nonexistent/docker"))

        await service.multi_save([], temp_dir / "images.tar")

        assert not (temp_dir / "images.tar").exists()


@pytest.mark.asyncio
class TestStatusStores:
    """Tests for status persistence."""

    async def test_in_memory(self):
        store = InMemoryStatusStore()
        await store.update({"event_id": "e1", "status": "running"})

        record = await store.get_by_task_id("e1")
        assert record["status"] == "running"

        with pytest.raises(StatusPersistError):
            await store.get_by_task_id("missing")

    async def test_record_needs_event_id(self):
        with pytest.raises(StatusPersistError):
            await InMemoryStatusStore().update({"status": "running"})

    async def test_json_file(self, temp_dir):
        path = temp_dir / "state" / "status.json"
        store = JsonFileStatusStore(path)

        await store.update({"event_id": "e1", "status": "running"})
        await store.update({"event_id": "e2", "status": "failed"})
        record = await store.get_by_task_id("e1")
        record["status"] = "success"
        await store.update(record)

        data = json.loads(path.read_text())
        assert data == {
            "e1": {"event_id": "e1", "status": "success"},
            "e2": {"event_id": "e2", "status": "failed"},
        }

    async def test_json_file_missing_record(self, temp_dir):
        store = JsonFileStatusStore(temp_dir / "status.json")

        with pytest.raises(StatusPersistError):
            await store.get_by_task_id("e1")

    async def test_json_file_corrupt(self, temp_dir):
        path = temp_dir / "status.json"
        path.write_text("[1, 2]")

        with pytest.raises(StatusPersistError):
            await JsonFileStatusStore(path).get_by_task_id("e1")


@pytest.mark.asyncio
class TestZipArchiver:
    """Tests for workspace archiving."""

    async def test_zip(self, temp_dir):
        source = temp_dir / "app"
        (source / "sub").mkdir(parents=True)
        (source / "metadata.json").write_text("{}")
        (source / "sub" / "file.txt").write_text("content")

        archive = await ZipArchiver().zip(source, temp_dir / "app.zip")

        assert archive == temp_dir / "app.zip"
        with zipfile.ZipFile(archive) as zf:
            assert set(zf.namelist()) >= {"metadata.json", "sub/file.txt"}

    async def test_zip_replaces_existing(self, temp_dir):
        source = temp_dir / "app"
        source.mkdir()
        (source / "new.txt").write_text("new")
        (temp_dir / "app.zip").write_text("old archive")

        archive = await ZipArchiver().zip(source, temp_dir / "app.zip")

        with zipfile.ZipFile(archive) as zf:
            assert "new.txt" in zf.namelist()

    async def test_missing_source(self, temp_dir):
        with pytest.raises(ArchivalError):
            await ZipArchiver().zip(temp_dir / "missing", temp_dir / "missing.zip")

    async def test_relative_names_and_cwd_untouched(self, temp_dir):
        source = temp_dir / "app"
        (source / "a" / "b").mkdir(parents=True)
        (source / "a" / "b" / "deep.txt").write_text("deep")
        (source / "empty").mkdir()
        cwd = os.getcwd()

        archive = await ZipArchiver().zip(source, temp_dir / "app.zip")

        assert os.getcwd() == cwd
        with zipfile.ZipFile(archive) as zf:
            assert zf.read("a/b/deep.txt") == b"deep"
            assert "empty/" in zf.namelist()
            assert not any(name.startswith("/") or "app/" in name for name in zf.namelist())


class TestLoggingEventLogger:
    """Tests for the event logger."""

    def test_events_recorded(self, caplog):
        events = LoggingEventLogger("evt-9")

        with caplog.at_level("INFO"):
            events.info("Start export app", {"step": "export-app", "status": "success"})
            events.error("Zip failure", {"step": "export-app", "status": "failure"})

        assert events.events[0] == ("info", "Start export app", {"step": "export-app", "status": "success"})
        assert events.events[1][0] == "error"
        assert "[evt-9] Start export app" in caplog.text


class FakeSftp:
    def __init__(self, files):
        self.files = files
        self.closed = False

    def get(self, remotepath, localpath):
        if remotepath not in self.files:
            raise FileNotFoundError(remotepath)
        with open(localpath, 'wb') as f:
            f.write(self.files[remotepath])

    def close(self):
        self.closed = True


class FakeSSHClient:
    instances = []
    files = {}

    def __init__(self):
        self.connect_args = None
        self.sftp = None
        self.closed = False
        FakeSSHClient.instances.append(self)

    def load_system_host_keys(self):
        pass

    def set_missing_host_key_policy(self, policy):
        self.policy = policy

    def connect(self, hostname, **kwargs):
        self.connect_args = (hostname, kwargs)

    def open_sftp(self):
        self.sftp = FakeSftp(self.files)
        return self.sftp

    def close(self):
        self.closed = True


@pytest.mark.asyncio
class TestSftpFileFetcher:
    """Tests for the SFTP build artifact fetcher."""

    @pytest.fixture(autouse=True)
    def fake_ssh(self, monkeypatch):
        FakeSSHClient.instances = []
        FakeSSHClient.files = {"/app_publish/app/v1.tgz": b"slug"}
        monkeypatch.setattr(sftp_fetcher.paramiko, "SSHClient", FakeSSHClient)

    async def test_download(self, temp_dir):
        fetcher = SftpFileFetcher()
        source = SlugSource(host="sftp.example.com", port="2022", username="user", password="pass")

        await fetcher.connect(source)
        await fetcher.download("/app_publish/app/v1.tgz", temp_dir / "app" / "v1.tgz")
        await fetcher.close()

        assert (temp_dir / "app" / "v1.tgz").read_bytes() == b"slug"
        client = FakeSSHClient.instances[0]
        hostname, kwargs = client.connect_args
        assert hostname == "sftp.example.com"
        assert kwargs["port"] == 2022
        assert kwargs["username"] == "user"
        assert kwargs["password"] == "pass"
        assert client.closed and client.sftp.closed

    async def test_default_port(self):
        fetcher = SftpFileFetcher()

        await fetcher.connect(SlugSource(host="sftp.example.com", port="not-a-port"))

        assert FakeSSHClient.instances[0].connect_args[1]["port"] == 22

    async def test_missing_remote_file(self, temp_dir):
        fetcher = SftpFileFetcher()
        await fetcher.connect(SlugSource(host="sftp.example.com"))

        with pytest.raises(ArtifactTransferError):
            await fetcher.download("/nope.tgz", temp_dir / "nope.tgz")

    async def test_without_host(self):
        with pytest.raises(ArtifactTransferError):
            await SftpFileFetcher().connect(SlugSource())

    async def test_download_before_connect(self, temp_dir):
        with pytest.raises(ArtifactTransferError):
            await SftpFileFetcher().download("/a.tgz", temp_dir / "a.tgz")

    async def test_connection_failure(self, monkeypatch):
        def refuse(self, hostname, **kwargs):
            raise OSError("connection refused")

        monkeypatch.setattr(FakeSSHClient, "connect", refuse)

        with pytest.raises(ArtifactTransferError):
            await SftpFileFetcher().connect(SlugSource(host="sftp.example.com"))
        assert FakeSSHClient.instances[0].closed
