"""Tests for the batch pipeline, chart rendering and CLI."""

from __future__ import annotations

import json

import pytest

from drill_timing.diagnostics import natural_schedule
from drill_timing.fixtures import ALL_FIXTURES, PASS_AND_RUN
from drill_timing.pipeline import OptimizationPipeline, main
from drill_timing.renderer import render, render_to_png


@pytest.fixture
def drill_file(tmp_path):
    path = tmp_path / "drill.json"
    path.write_text(json.dumps(PASS_AND_RUN))
    return path


def test_run_writes_requested_outputs(pass_and_run, tmp_path):
    result = OptimizationPipeline().run(
        pass_and_run,
        output_json=str(tmp_path / "out.json"),
        output_svg=str(tmp_path / "timeline.svg"),
        output_png=str(tmp_path / "timeline.png"),
    )

    assert result.state is pass_and_run
    assert result.sync_count == 1
    assert result.errors == []
    assert result.idle_after == 0

    saved = json.loads((tmp_path / "out.json").read_text())
    run = saved["players"][1]["actions"][0]
    assert run["waitBefore"] > 0
    assert run["config"]["preEvent"].startswith("wait:")
    assert "startX" in run and "start_x" not in run

    assert "<svg" in (tmp_path / "timeline.svg").read_text()
    assert (tmp_path / "timeline.png").read_bytes().startswith(b"\x89PNG")


def test_run_without_outputs_writes_nothing(pass_and_run):
    result = OptimizationPipeline().run(pass_and_run)
    assert (result.json_path, result.svg_path, result.png_path) == (None, None, None)


def test_run_from_json(drill_file):
    result = OptimizationPipeline().run_from_json(str(drill_file))

    assert [p.id for p in result.state.players] == ["passer", "receiver"]
    assert result.state.players[1].actions[0].speed == 86


def test_validation_problems_do_not_block_optimization(tmp_path):
    data = json.loads(json.dumps(PASS_AND_RUN))
    data["players"][1]["actions"][1]["startX"] = 400
    path = tmp_path / "gap.json"
    path.write_text(json.dumps(data))

    result = OptimizationPipeline().run_from_json(str(path))

    assert result.warnings
    assert result.sync_count == 1


def test_renderer_handles_every_fixture(any_state, tmp_path):
    out = render(natural_schedule(any_state), str(tmp_path / "chart.svg"))
    assert "<svg" in open(out).read()


def test_renderer_handles_empty_schedule(tmp_path):
    out = render_to_png([], str(tmp_path / "empty.png"))
    assert open(out, "rb").read().startswith(b"\x89PNG")


def test_cli_optimizes_file(drill_file, tmp_path, capsys):
    out = tmp_path / "optimized.json"

    assert main([str(drill_file), "-o", str(out), "--svg", str(tmp_path / "t.svg")]) == 0

    printed = capsys.readouterr().out
    assert "Synchronizations: 1" in printed
    assert json.loads(out.read_text())["players"][1]["actions"][0]["speed"] == 86


def test_cli_proximity_option_disables_sync(drill_file, capsys):
    assert main([str(drill_file), "--proximity", "1"]) == 0
    assert "Synchronizations: 0" in capsys.readouterr().out


def test_cli_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert "Error:" in capsys.readouterr().out


def test_cli_reports_malformed_drill(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"players": [{"actions": []}]}))

    assert main([str(path)]) == 1


@pytest.mark.parametrize("name", sorted(ALL_FIXTURES))
def test_cli_accepts_every_fixture(name, tmp_path):
    path = tmp_path / f"{name}.json"
    path.write_text(json.dumps(ALL_FIXTURES[name]))
    assert main([str(path)]) == 0


def test_renderer_leaves_pyplot_figure_registry_alone(pass_and_run, tmp_path):
    import matplotlib.pyplot as plt

    before = plt.get_fignums()
    render(natural_schedule(pass_and_run), str(tmp_path / "a.svg"))
    render_to_png(natural_schedule(pass_and_run), str(tmp_path / "a.png"))

    assert plt.get_fignums() == before
