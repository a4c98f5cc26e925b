"""Tests for the odata-openapi CLI."""

from __future__ import annotations

import json

import yaml
from click.testing import CliRunner
from rich.console import Console

from odata_openapi import __version__
from odata_openapi import cli as cli_module
from odata_openapi.cli import cli


class TestGenerate:
    def test_writes_yaml_document(self, sample_model_file, tmp_path) -> None:
        output = tmp_path / "openapi.yaml"
        runner = CliRunner()

        result = runner.invoke(cli, ["generate", str(sample_model_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        document = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert "/Entities" in document["paths"]
        parameters = [p["name"] for p in document["paths"]["/Entities"]["get"]["parameters"]]
        assert "$search" not in parameters
        assert "$top" not in parameters

    def test_json_to_stdout(self, sample_model_file) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", str(sample_model_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        document = json.loads(result.output)
        assert document["openapi"] == "3.0.1"

    def test_flags(self, sample_model_file, tmp_path) -> None:
        output = tmp_path / "openapi.json"
        runner = CliRunner()

        result = runner.invoke(
            cli,
            [
                "generate",
                str(sample_model_file),
                "--format",
                "json",
                "-o",
                str(output),
                "--no-operation-id",
                "--key-as-segment",
                "--pagination",
            ],
        )

        assert result.exit_code == 0, result.output
        document = json.loads(output.read_text(encoding="utf-8"))
        assert "/Entities/{Id}" in document["paths"]
        list_operation = document["paths"]["/Entities"]["get"]
        assert "operationId" not in list_operation
        assert "x-ms-pageable" in list_operation

    def test_config_file(self, sample_model_file, tmp_path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text(yaml.safe_dump({"service_root": "https://svc.example.com"}), encoding="utf-8")
        output = tmp_path / "openapi.yaml"

        result = CliRunner().invoke(
            cli, ["generate", str(sample_model_file), "--config", str(config), "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        document = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert document["servers"] == [{"url": "https://svc.example.com"}]

    def test_invalid_model(self, tmp_path) -> None:
        model_file = tmp_path / "broken.yaml"
        model_file.write_text("container: {name: Default}\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["generate", str(model_file)])

        assert result.exit_code == 1

    def test_invalid_config_value(self, sample_model_file, tmp_path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text(yaml.safe_dump({"top_example": "abc"}), encoding="utf-8")

        result = CliRunner().invoke(cli, ["generate", str(sample_model_file), "--config", str(config)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_missing_model_file(self, tmp_path) -> None:
        result = CliRunner().invoke(cli, ["generate", str(tmp_path / "missing.yaml")])
        assert result.exit_code != 0


class TestInspect:
    def test_table(self, sample_model_file, monkeypatch) -> None:
        monkeypatch.setattr(cli_module, "console", Console(width=200))

        result = CliRunner().invoke(cli, ["inspect", str(sample_model_file)])

        assert result.exit_code == 0, result.output
        assert "NS.Default" in result.output
        assert "Entities" in result.output
        assert "Archive" in result.output
        assert "default" in result.output
        assert "Me" in result.output


class TestVersion:
    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
