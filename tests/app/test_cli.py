from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from app import cli
from domain.models import ProcessFlow

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def test_generate_prints_flow_json() -> None:
    result = runner.invoke(cli.app, ["generate", "--seed", "abc", "--max-nodes", "3"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [step["id"] for step in payload["steps"]] == ["step-1", "step-2", "step-3"]
    assert len(payload["links"]) == 2


def test_generate_rejects_blank_seed() -> None:
    result = runner.invoke(cli.app, ["generate", "--seed", "   "])

    assert result.exit_code == 1
    assert "seed is required" in result.output


def test_generate_writes_output_file(tmp_path: Path, reference_flow: ProcessFlow) -> None:
    target = tmp_path / "out" / "flow.json"
    result = runner.invoke(
        cli.app, ["generate", "--seed", "abc", "--max-nodes", "3", "--output", str(target)]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(target.read_text(encoding="utf-8")) == reference_flow.to_dict()


def test_diagram_uses_direction_override() -> None:
    result = runner.invoke(
        cli.app, ["diagram", "--seed", "abc", "--max-nodes", "3", "--direction", "LR"]
    )

    assert result.exit_code == 0, result.output
    nodes = json.loads(result.stdout)["nodes"]
    assert [node["position"]["x"] for node in nodes] == [0.0, 296.0, 592.0]
    assert {node["incomingAnchorSide"] for node in nodes} == {"left"}


def test_layout_command_reads_flow_file(tmp_path: Path, reference_flow: ProcessFlow) -> None:
    source = tmp_path / "flow.json"
    source.write_text(json.dumps(reference_flow.to_dict()), encoding="utf-8")

    result = runner.invoke(cli.app, ["layout", str(source)])

    assert result.exit_code == 0, result.output
    nodes = json.loads(result.stdout)["nodes"]
    assert [node["position"]["y"] for node in nodes] == [0.0, 152.0, 304.0]


def test_layout_command_reports_cycles(tmp_path: Path, reference_flow: ProcessFlow) -> None:
    payload = reference_flow.to_dict()
    payload["links"].append({"id": "edge-step-3-step-1", "sourceId": "step-3", "targetId": "step-1"})
    source = tmp_path / "cyclic.json"
    source.write_text(json.dumps(payload), encoding="utf-8")

    result = runner.invoke(cli.app, ["layout", str(source)])

    assert result.exit_code == 1
    assert "Layout failed" in result.output


def test_layout_command_reports_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["layout", str(tmp_path / "nope.json")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_layout_command_reports_invalid_json(tmp_path: Path) -> None:
    source = tmp_path / "broken.json"
    source.write_text("{not json", encoding="utf-8")

    result = runner.invoke(cli.app, ["layout", str(source)])

    assert result.exit_code == 1
    assert "Invalid process flow" in result.output


def test_missing_config_file_exits(tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app, ["--config", str(tmp_path / "missing.yaml"), "generate", "--seed", "abc"]
    )

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_cards_render_node_table(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "console", Console(width=200))

    result = runner.invoke(cli.app, ["cards", "--seed", "abc", "--max-nodes", "3"])

    assert result.exit_code == 0, result.output
    assert "Investigation App" in result.stdout
    assert "7h 19m" in result.stdout
    assert "13h 40.6m" in result.stdout


def test_unknown_log_level_option_exits_cleanly() -> None:
    result = runner.invoke(cli.app, ["--log-level", "verbose", "generate", "--seed", "abc"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert "Unknown log level" in result.output


def test_log_level_option_is_case_insensitive() -> None:
    result = runner.invoke(cli.app, ["--log-level", "error", "generate", "--seed", "abc"])

    assert result.exit_code == 0, result.output


def test_unknown_log_level_in_config_exits_cleanly(tmp_path: Path) -> None:
    config_path = tmp_path / "flow.yaml"
    config_path.write_text("log_level: debugg\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["--config", str(config_path), "generate", "--seed", "abc"])

    assert result.exit_code == 1
    assert "Invalid settings" in result.output


def test_unknown_log_level_in_environment_exits_cleanly(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PFLOW_LOG_LEVEL", "loud")

    result = runner.invoke(cli.app, ["generate", "--seed", "abc"])

    assert result.exit_code == 1
    assert "Invalid settings" in result.output
