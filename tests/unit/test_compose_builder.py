"""Unit tests for the compose descriptor builder."""

import yaml

from export_tool.core.compose_builder import ComposeBuilder
from export_tool.core.dependency_resolver import DependencyResolver
from export_tool.core.name_sanitizer import ServiceNameRegistry
from export_tool.models.config import ComposeConfig
from export_tool.models.manifest import ApplicationManifest


def build(manifest_data, image_names=None, config=None):
    manifest = ApplicationManifest.from_dict(manifest_data)
    registry = ServiceNameRegistry.build(manifest.components)
    resolution = DependencyResolver(token_factory=lambda: "0badc0de").resolve(manifest.components, registry)
    return ComposeBuilder(config).build(resolution, image_names or {})


class TestComposeBuilder:
    """Tests for descriptor generation."""

    def test_services_and_volumes(self, structured_manifest):
        descriptor = build(structured_manifest, {
            "db-uuid": "goodrain.me/mysql:5.7",
            "web-uuid": "goodrain.me/nginx:latest",
        })

        data = descriptor.to_dict()
        assert data["version"] == "2.1"
        assert data["volumes"] == {"db_data": {"external": False}}
        assert list(data["services"]) == ["db", "web"]

        web = data["services"]["web"]
        assert web["image"] == "goodrain.me/nginx:latest"
        assert web["container_name"] == "web"
        assert web["restart"] == "always"
        assert web["network_mode"] == "host"
        assert web["depends_on"] == ["db"]
        assert web["command"] == "nginx -g 'daemon off;'"
        assert web["volumes"] == [
            "./web/etc/nginx/conf.d/default.conf:/etc/nginx/conf.d/default.conf",
            "db_data:/mnt/a-data",
        ]
        assert web["environment"]["DSN"] == "mysql://127.0.0.1:3306/app"
        assert web["environment"]["PORT"] == "80"
        assert web["logging"] == {"driver": "json-file", "options": {"max-size": "5m", "max-file": "2"}}

        db = data["services"]["db"]
        assert db["environment"]["MYSQL_ROOT_PASSWORD"] == "0badc0de"
        assert db["environment"]["MEMORY_SIZE"] == "medium"
        assert "depends_on" not in db
        assert "command" not in db

    def test_component_without_image(self):
        descriptor = build({"components": [{"service_cname": "job", "service_share_uuid": "j"}]})

        service = descriptor.to_dict()["services"]["job"]
        assert "image" not in service
        assert service["container_name"] == "job"

    def test_no_named_volumes_omits_section(self):
        descriptor = build({"components": [{"service_cname": "a", "service_share_uuid": "a"}]})

        assert "volumes" not in descriptor.to_dict()

    def test_duplicate_names(self):
        descriptor = build({"components": [
            {"service_cname": "测试", "service_share_uuid": "1", "share_image": "a"},
            {"service_cname": "测试", "service_share_uuid": "2", "share_image": "b"},
        ]}, {"1": "goodrain.me/a:latest", "2": "goodrain.me/b:latest"})

        names = list(descriptor.services)
        assert len(names) == 2
        assert names[0] == "ceshi"
        assert names[1].startswith("ceshi-")

    def test_configured_policies(self):
        config = ComposeConfig(restart="unless-stopped", network_mode="bridge", log_max_size="10m")
        descriptor = build({"components": [{"service_cname": "a", "service_share_uuid": "a"}]}, config=config)

        service = descriptor.to_dict()["services"]["a"]
        assert service["restart"] == "unless-stopped"
        assert service["network_mode"] == "bridge"
        assert service["logging"]["options"]["max-size"] == "10m"

    def test_yaml_output(self, structured_manifest):
        descriptor = build(structured_manifest, {"db-uuid": "goodrain.me/mysql:5.7"})

        text = descriptor.to_yaml()
        data = yaml.safe_load(text)

        assert text.startswith("version: '2.1'")
        assert data["services"]["db"]["logging"]["options"]["max-file"] == "2"
        assert data["services"]["db"]["image"] == "goodrain.me/mysql:5.7"

    def test_builder_is_pure(self, structured_manifest):
        manifest = ApplicationManifest.from_dict(structured_manifest)
        registry = ServiceNameRegistry.build(manifest.components)
        resolution = DependencyResolver(token_factory=lambda: "0badc0de").resolve(manifest.components, registry)
        builder = ComposeBuilder()

        first = builder.build(resolution, {}).to_dict()
        second = builder.build(resolution, {}).to_dict()

        assert first == second
