"""Unit tests for the Exporter API and the CLI."""

import json

import yaml
from click.testing import CliRunner

from export_tool.api.exporter import Exporter
from export_tool.cli.main import cli
from export_tool.collaborators import Collaborators, InMemoryStatusStore, ZipArchiver
from export_tool.models.task import ExportState


class TestExporter:
    """Tests for the synchronous facade."""

    def test_registers_and_exports(self, make_workspace, structured_manifest, images, config):
        source = make_workspace(structured_manifest)
        store = InMemoryStatusStore()
        exporter = Exporter(config, Collaborators(images=images, status_store=store, archiver=ZipArchiver()))

        result = exporter.export("evt-new", "docker-compose", source)

        assert result.success
        assert result.state == ExportState.SUCCEEDED
        assert store.records["evt-new"]["status"] == "success"
        assert exporter.status("evt-new")["status"] == "success"

    def test_without_registration_status_is_not_persisted(self, make_workspace, structured_manifest,
                                                          images, config):
        source = make_workspace(structured_manifest)
        store = InMemoryStatusStore()
        exporter = Exporter(config, Collaborators(images=images, status_store=store, archiver=ZipArchiver()))

        result = exporter.export("evt-new", "docker-compose", source, register=False)

        assert result.success
        assert not result.status_persisted
        assert "evt-new" not in store.records

    def test_render_compose_does_not_touch_images(self, make_workspace, structured_manifest,
                                                   images, collaborators, config):
        source = make_workspace(structured_manifest)

        descriptor = Exporter(config, collaborators).render_compose(source)

        data = descriptor.to_dict()
        assert data["services"]["web"]["image"] == "goodrain.me/nginx:latest"
        assert data["services"]["web"]["depends_on"] == ["db"]
        assert images.calls == []


class TestCli:
    """Tests for the command line interface."""

    def write_config(self, temp_dir, status_file):
        path = temp_dir / "config.yaml"
        path.write_text(yaml.dump({"status_file": str(status_file)}))
        return path

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "export-tool" in result.output

    def test_compose_to_file(self, temp_dir, make_workspace, structured_manifest):
        source = make_workspace(structured_manifest)
        config_file = self.write_config(temp_dir, temp_dir / "status.json")
        output = temp_dir / "docker-compose.yaml"

        result = CliRunner().invoke(cli, ["-c", str(config_file), "compose", str(source), "-o", str(output)])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(output.read_text())
        assert set(data["services"]) == {"db", "web"}

    def test_compose_without_manifest(self, temp_dir, workspace):
        config_file = self.write_config(temp_dir, temp_dir / "status.json")

        result = CliRunner().invoke(cli, ["-c", str(config_file), "compose", str(workspace)])

        assert result.exit_code == 1

    def test_status(self, temp_dir):
        status_file = temp_dir / "status.json"
        status_file.write_text(json.dumps({"evt-1": {"event_id": "evt-1", "status": "failed"}}))
        config_file = self.write_config(temp_dir, status_file)

        result = CliRunner().invoke(cli, ["-c", str(config_file), "status", "evt-1"])

        assert result.exit_code == 0, result.output
        assert "failed" in result.output

    def test_status_unknown_task(self, temp_dir):
        config_file = self.write_config(temp_dir, temp_dir / "status.json")

        result = CliRunner().invoke(cli, ["-c", str(config_file), "status", "evt-404"])

        assert result.exit_code == 1

    def test_missing_config_file(self, temp_dir):
        result = CliRunner().invoke(cli, ["-c", str(temp_dir / "none.yaml"), "status", "evt-1"])

        assert result.exit_code == 1
