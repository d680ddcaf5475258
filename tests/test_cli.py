"""Tests for the command-line interface."""

import json
from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner

from launchcraft.cli.main import main
from launchcraft.core.generation_client import GenerationClient
from launchcraft.core.logging import configure_logging
from launchcraft.core.store import FileStateRepository, ProjectStore

WIDE = {"COLUMNS": "200"}


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI binds log handlers to the runner's streams; rebind them afterwards."""
    yield
    configure_logging()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def data_dir(isolated_env, monkeypatch):
    path = isolated_env / "data"
    monkeypatch.setenv("LAUNCHCRAFT_DATA_DIR", str(path))
    return path


@pytest.fixture
def project_file(isolated_env, project_data):
    path = isolated_env / "app.json"
    path.write_text(json.dumps(project_data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def sdk(make_completion, app_name_payload):
    sdk = MagicMock()
    sdk.chat.completions.create.return_value = make_completion(json.dumps(app_name_payload))
    return sdk


@pytest.fixture
def fake_client(sdk):
    client = GenerationClient(api_key="sk-test", client=sdk)
    with patch("launchcraft.cli.main.create_generation_client", return_value=client) as factory:
        yield factory


class TestValidateCommand:
    def test_valid_file(self, runner, data_dir, project_file):
        result = runner.invoke(main, ["validate", str(project_file)], env=WIDE)
        assert result.exit_code == 0
        assert "Valid project" in result.output

    def test_yaml_file(self, runner, data_dir, isolated_env, project_data):
        path = isolated_env / "app.yaml"
        path.write_text(yaml.safe_dump(project_data, allow_unicode=True), encoding="utf-8")

        result = runner.invoke(main, ["validate", str(path)], env=WIDE)
        assert result.exit_code == 0

    def test_invalid_file(self, runner, data_dir, isolated_env, project_data):
        project_data["coreFunctions"] = []
        path = isolated_env / "bad.json"
        path.write_text(json.dumps(project_data), encoding="utf-8")

        result = runner.invoke(main, ["validate", str(path)], env=WIDE)
        assert result.exit_code == 1
        assert "coreFunctions" in result.output

    def test_unparseable_file(self, runner, data_dir, isolated_env):
        path = isolated_env / "broken.json"
        path.write_text("{oops", encoding="utf-8")

        result = runner.invoke(main, ["validate", str(path)], env=WIDE)
        assert result.exit_code == 1
        assert "Could not parse" in result.output


class TestGenerateCommand:
    def test_generate_to_file(self, runner, data_dir, project_file, isolated_env, fake_client, app_name_payload):
        output = isolated_env / "names.json"

        result = runner.invoke(
            main, ["generate", str(project_file), "--type", "app_name", "-o", str(output)], env=WIDE
        )

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text(encoding="utf-8")) == app_name_payload

    def test_generate_yaml(self, runner, data_dir, project_file, isolated_env, fake_client, app_name_payload):
        output = isolated_env / "names.yaml"

        result = runner.invoke(
            main,
            ["generate", str(project_file), "-t", "app_name", "-f", "yaml", "-o", str(output)],
            env=WIDE,
        )

        assert result.exit_code == 0, result.output
        assert yaml.safe_load(output.read_text(encoding="utf-8")) == app_name_payload

    def test_cli_options_reach_config(self, runner, data_dir, project_file, isolated_env, fake_client):
        runner.invoke(
            main,
            [
                "generate", str(project_file), "-t", "app_name", "-o", str(isolated_env / "out.json"),
                "--model", "gpt-4o", "--max-retries", "2",
            ],
            env=WIDE,
        )

        config = fake_client.call_args.args[0]
        assert config.model == "gpt-4o"
        assert config.max_retries == 2

    def test_missing_api_key(self, runner, data_dir, project_file):
        result = runner.invoke(main, ["generate", str(project_file), "--type", "app_name"], env=WIDE)

        assert result.exit_code == 1
        assert "provider not configured" in result.output

    def test_invalid_project(self, runner, data_dir, isolated_env, project_data, fake_client, sdk):
        project_data["concept"] = "short"
        path = isolated_env / "bad.json"
        path.write_text(json.dumps(project_data), encoding="utf-8")

        result = runner.invoke(main, ["generate", str(path), "--type", "app_name"], env=WIDE)

        assert result.exit_code == 1
        sdk.chat.completions.create.assert_not_called()

    def test_save_and_manage_projects(self, runner, data_dir, project_file, isolated_env, fake_client):
        result = runner.invoke(
            main,
            ["generate", str(project_file), "-t", "app_name", "-o", str(isolated_env / "out.json"), "--save"],
            env=WIDE,
        )
        assert result.exit_code == 0, result.output

        store = ProjectStore(FileStateRepository(data_dir / "sessions"))
        project_id = store.current_project.id
        assert "app_name" in {kind.value for kind in store.current_project.results}

        listed = runner.invoke(main, ["projects", "list"], env=WIDE)
        assert listed.exit_code == 0
        assert project_id in listed.output

        shown = runner.invoke(main, ["projects", "show", project_id], env=WIDE)
        assert shown.exit_code == 0
        assert json.loads(shown.output)["id"] == project_id

        deleted = runner.invoke(main, ["projects", "delete", project_id], env=WIDE)
        assert deleted.exit_code == 0
        assert ProjectStore(FileStateRepository(data_dir / "sessions")).projects == []

        missing = runner.invoke(main, ["projects", "show", project_id], env=WIDE)
        assert missing.exit_code == 1

    def test_sessions_are_separate(self, runner, data_dir, project_file, isolated_env, fake_client):
        runner.invoke(
            main,
            [
                "generate", str(project_file), "-t", "app_name", "-o", str(isolated_env / "out.json"),
                "--save", "--session", "work",
            ],
            env=WIDE,
        )

        assert ProjectStore(FileStateRepository(data_dir / "sessions"), "work").current_project is not None
        assert ProjectStore(FileStateRepository(data_dir / "sessions")).current_project is None

        cleared = runner.invoke(main, ["projects", "clear", "--session", "work", "--yes"], env=WIDE)
        assert cleared.exit_code == 0
        assert ProjectStore(FileStateRepository(data_dir / "sessions"), "work").projects == []


class TestOtherCommands:
    def test_catalog_json(self, runner, data_dir):
        result = runner.invoke(main, ["catalog", "--format", "json"], env=WIDE)
        assert result.exit_code == 0
        catalog = json.loads(result.output)
        assert len(catalog["brandTones"]) == 8

    def test_catalog_table(self, runner, data_dir):
        result = runner.invoke(main, ["catalog"], env=WIDE)
        assert result.exit_code == 0
        assert "social_networking" in result.output

    def test_config_export(self, runner, data_dir):
        result = runner.invoke(main, ["config", "export", "--format", "json"], env=WIDE)
        assert result.exit_code == 0
        assert json.loads(result.output)["model"] == "gpt-4-turbo-preview"

    def test_serve_runs_django(self, runner, data_dir):
        with patch("django.core.management.call_command") as call_command:
            result = runner.invoke(main, ["serve", "--port", "9000"], env=WIDE)

        assert result.exit_code == 0, result.output
        call_command.assert_called_once_with("runserver", "127.0.0.1:9000", use_reloader=False)
