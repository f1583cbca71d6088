"""
Tests for the Typer CLI against the bundled sample data.
"""

import json

from typer.testing import CliRunner

from salon_schedule.adapters import SAMPLE_DATA_FILE
from salon_schedule.cli.app import app

runner = CliRunner()


def test_free_slots_command():
    result = runner.invoke(app, [
        "free-slots", "-m", "olena", "--date", "2024-06-10", "-d", "60",
        "--data", str(SAMPLE_DATA_FILE),
    ])

    assert result.exit_code == 0, result.output
    assert "Olena Kovalenko" in result.output
    assert "09:00" in result.output
    assert "11:00" in result.output


def test_gaps_command_on_override_day_off():
    result = runner.invoke(app, [
        "gaps", "-m", "m-olena", "--date", "2024-06-11",
        "--data", str(SAMPLE_DATA_FILE),
    ])

    assert result.exit_code == 0, result.output
    assert "not working" in result.output


def test_tool_command_prints_json():
    result = runner.invoke(app, [
        "tool", "free_slots", "--args", json.dumps({"date": "2024-06-10"}),
        "--data", str(SAMPLE_DATA_FILE),
    ])

    assert result.exit_code == 0, result.output
    assert '"master_required"' in result.output


def test_tool_command_unknown_tool_fails():
    result = runner.invoke(app, ["tool", "nope", "--data", str(SAMPLE_DATA_FILE)])

    assert result.exit_code == 1
    assert "Unknown tool" in result.output


def test_unknown_master_exits_with_error():
    result = runner.invoke(app, [
        "free-slots", "-m", "nobody", "--date", "2024-06-10",
        "--data", str(SAMPLE_DATA_FILE),
    ])

    assert result.exit_code == 1
    assert "Master not found" in result.output
