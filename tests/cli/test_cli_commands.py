"""
CLI command tests.

The migrate command is exercised end to end in dry-run mode: manifests are
read from a temporary directory and replayed into the in-memory repository.
"""

import json
from unittest.mock import patch

import pytest

from constants import ExitCode, LegacyPredicates
from fedora_client import FedoraAPIError
from main import build_parser, main
from fixtures import DC_XML


@pytest.fixture
def export_dir(tmp_path):
    export = tmp_path / "export"
    export.mkdir()
    for number in (1, 2, 3):
        manifest = {
            "pid": f"demo:{number}",
            "properties": {LegacyPredicates.LABEL: f"Object {number}"},
            "versions": [
                {"date": "2015-01-01T00:00:00.000Z", "datastreams": [
                    {"id": "DC", "control_group": "X", "content": DC_XML.decode("utf-8")},
                    {"id": "DS1", "control_group": "M", "content": "abc", "label": "Text"},
                ]},
                {"date": "2015-01-02T00:00:00.000Z", "datastreams": [
                    {"id": "DS1", "control_group": "M", "content": "abc def", "label": "Text"},
                ]},
            ],
        }
        (export / f"demo_{number}.json").write_text(json.dumps(manifest), encoding="utf-8")
    return export


@pytest.fixture
def migrate_config(tmp_path, export_dir, sample_config):
    sample_config["migration"]["source_dir"] = str(export_dir)
    sample_config["migration"]["limit"] = -1
    sample_config["logging"] = {"level": "WARNING"}
    path = tmp_path / "migrate.json"
    path.write_text(json.dumps(sample_config), encoding="utf-8")
    return str(path)


@pytest.mark.unit
class TestParser:

    def test_migrate_arguments(self):
        args = build_parser().parse_args(
            ["migrate", "--config", "c.json", "--limit", "5", "--dry-run", "--show-updates", "--no-progress"]
        )
        assert args.command == "migrate"
        assert args.limit == 5
        assert args.dry_run and args.show_updates and args.no_progress

    def test_no_command_prints_help(self, capsys):
        assert main([]) == ExitCode.ERROR
        assert "migrate" in capsys.readouterr().out


@pytest.mark.integration
class TestMigrateCommand:

    def test_dry_run(self, migrate_config, capsys):
        code = main(["migrate", "--config", migrate_config, "--dry-run", "--no-progress"])

        out = capsys.readouterr().out
        assert code == ExitCode.SUCCESS
        assert "Dry run: 3 objects, 6 versions" in out
        assert "Objects created:     3" in out
        assert "Snapshots:           6" in out

    def test_dry_run_respects_limit(self, migrate_config, capsys):
        code = main(["migrate", "--config", migrate_config, "--dry-run", "--no-progress", "--limit", "1"])

        assert code == ExitCode.SUCCESS
        assert "Dry run: 1 objects, 2 versions" in capsys.readouterr().out

    def test_show_updates_prints_sparql(self, migrate_config, capsys):
        main(["migrate", "--config", migrate_config, "--dry-run", "--no-progress", "--limit", "1", "--show-updates"])

        out = capsys.readouterr().out
        assert "--- /migrated/demo:1/DS1" in out
        assert "DELETE WHERE {" in out
        assert "INSERT DATA {" in out

    def test_source_override(self, migrate_config, tmp_path, capsys):
        empty = tmp_path / "empty"
        empty.mkdir()
        code = main(["migrate", "--config", migrate_config, "--dry-run", "--no-progress", "--source", str(empty)])

        assert code == ExitCode.SUCCESS
        assert "Dry run: 0 objects" in capsys.readouterr().out

    def test_broken_object_returns_migration_error(self, migrate_config, export_dir, capsys):
        broken = {"pid": "demo:0", "versions": [
            {"date": "2015-01-01T00:00:00.000Z", "datastreams": [
                {"id": "DC", "control_group": "X", "content": "<not-closed>"},
            ]},
        ]}
        (export_dir / "demo_0.json").write_text(json.dumps(broken), encoding="utf-8")

        code = main(["migrate", "--config", migrate_config, "--dry-run", "--no-progress"])

        assert code == ExitCode.MIGRATION_ERROR
        assert "demo:0" in capsys.readouterr().out

    def test_malformed_datastream_entry_returns_validation_error(self, migrate_config, export_dir, capsys):
        bad = {"pid": "demo:0", "versions": [
            {"date": "2015-01-01T00:00:00.000Z", "datastreams": [{"id": "DS1", "content_file": 5}]},
        ]}
        (export_dir / "demo_0.json").write_text(json.dumps(bad), encoding="utf-8")

        code = main(["migrate", "--config", migrate_config, "--dry-run", "--no-progress"])

        assert code == ExitCode.VALIDATION_ERROR
        assert "'content_file' must be a string" in capsys.readouterr().out

    def test_missing_source_dir_setting(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"fedora": {}, "logging": {"level": "WARNING"}}), encoding="utf-8")

        assert main(["migrate", "--config", str(path), "--dry-run"]) == ExitCode.CONFIG_ERROR
        assert "source_dir is required" in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path):
        assert main(["migrate", "--config", str(tmp_path / "missing.json")]) == ExitCode.CONFIG_ERROR

    def test_missing_export_directory(self, migrate_config, tmp_path):
        code = main(["migrate", "--config", migrate_config, "--dry-run", "--source", str(tmp_path / "nowhere")])
        assert code == ExitCode.VALIDATION_ERROR


@pytest.mark.unit
class TestValidateConfigCommand:

    def test_valid_config(self, config_file, capsys):
        assert main(["validate-config", "--config", config_file]) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "http://localhost:8080/rest" in out
        assert "Limit:           25" in out

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"migration": {"limit": "ten"}}), encoding="utf-8")

        assert main(["validate-config", "--config", str(path)]) == ExitCode.CONFIG_ERROR
        assert "migration.limit" in capsys.readouterr().out

    def test_check_connection_failure(self, config_file, capsys):
        with patch("fedora_client.FedoraRepositoryClient.get_repository_info") as mock_info:
            mock_info.side_effect = FedoraAPIError(503, "ConnectionError", "refused")
            code = main(["validate-config", "--config", config_file, "--check-connection"])

        assert code == ExitCode.API_ERROR
        assert "Could not reach Fedora" in capsys.readouterr().out

    def test_check_connection_success(self, config_file, capsys):
        with patch("fedora_client.FedoraRepositoryClient.get_repository_info",
                   return_value={"status_code": 200, "body": {}}):
            code = main(["validate-config", "--config", config_file, "--check-connection"])

        assert code == ExitCode.SUCCESS
        assert "Connection:      OK (HTTP 200)" in capsys.readouterr().out
