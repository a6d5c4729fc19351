"""
Tests for the Typer CLI.
"""

import json

import pytest
from typer.testing import CliRunner

from teamavailability.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path, availability_rows):
    (tmp_path / "availability.json").write_text(json.dumps(availability_rows), encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text(
        "data_source:\n"
        "  json_file: availability.json\n"
        "instructors:\n"
        "  - name: Alex\n"
        "    email: alex@example.com\n"
        "  - name: Sam\n"
        "    email: sam@example.com\n"
        "views:\n"
        "  - name: Skills lab\n"
        "    instructor_emails: [alex@example.com, sam@example.com]\n",
        encoding="utf-8",
    )
    return path


def test_find_prints_overlaps(config_file):
    result = runner.invoke(
        app,
        ["find", "alex", "sam", "--config", str(config_file), "--start", "2024-06-10", "--end", "2024-06-12"],
    )

    assert result.exit_code == 0, result.output
    assert "2 common window(s) found" in result.output
    assert "Monday, 2024-06-10 | 13:00 - 17:00 (4h)" in result.output
    assert "Tuesday, 2024-06-11 | 14:00 - 15:00 (1h)" in result.output


def test_find_with_saved_view_and_individual(config_file):
    result = runner.invoke(
        app,
        [
            "find", "--view", "skills lab", "--config", str(config_file),
            "--start", "2024-06-11", "--end", "2024-06-11", "--individual",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Individual availability" in result.output
    assert "all day" in result.output


def test_find_without_common_time(config_file):
    result = runner.invoke(
        app,
        ["find", "alex", "sam", "--config", str(config_file), "--start", "2024-06-12", "--end", "2024-06-12"],
    )

    assert result.exit_code == 0, result.output
    assert "No common availability found" in result.output


def test_find_requires_two_instructors(config_file):
    result = runner.invoke(app, ["find", "alex", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "at least 2 instructors" in result.output


def test_find_rejects_inverted_range(config_file):
    result = runner.invoke(
        app,
        ["find", "alex", "sam", "--config", str(config_file), "--start", "2024-06-12", "--end", "2024-06-10"],
    )

    assert result.exit_code == 1
    assert "end date must not be before start date" in result.output


def test_find_unknown_view(config_file):
    result = runner.invoke(app, ["find", "--view", "nope", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Unknown team view" in result.output


def test_data_option_overrides_config(tmp_path, availability_rows):
    data = tmp_path / "rows.json"
    data.write_text(json.dumps(availability_rows), encoding="utf-8")
    config = tmp_path / "empty.yaml"
    config.write_text("{}\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "find", "alex@example.com", "jo@example.com", "--config", str(config),
            "--data", str(data), "--start", "2024-06-10", "--end", "2024-06-10",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "09:00 - 12:00" in result.output


def test_list_views(config_file):
    result = runner.invoke(app, ["list-views", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "Skills lab" in result.output
    assert "Alex, Sam" in result.output


def test_list_instructors(config_file):
    result = runner.invoke(app, ["list-instructors", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "alex@example.com" in result.output


def test_find_with_view_runs_saved_view_search(config_file, monkeypatch):
    """--view goes through the service's saved-view search."""
    from teamavailability.services.team_availability import TeamAvailabilityService

    seen = []
    original = TeamAvailabilityService.find_for_view

    def recording_find_for_view(self, view, **kwargs):
        seen.append(view.name)
        return original(self, view, **kwargs)

    monkeypatch.setattr(TeamAvailabilityService, "find_for_view", recording_find_for_view)

    result = runner.invoke(
        app,
        ["find", "--view", "Skills lab", "--config", str(config_file), "--start", "2024-06-10", "--end", "2024-06-10"],
    )

    assert result.exit_code == 0, result.output
    assert seen == ["Skills lab"]
    assert "13:00 - 17:00" in result.output


def test_find_with_directory_as_data_file(tmp_path):
    config = tmp_path / "empty.yaml"
    config.write_text("{}\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "find", "a@example.com", "b@example.com", "--config", str(config),
            "--data", str(tmp_path), "--start", "2024-06-10", "--end", "2024-06-10",
        ],
    )

    assert result.exit_code == 1
    assert "Could not read" in result.output
