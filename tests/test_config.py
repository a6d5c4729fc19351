"""
Tests for configuration loading and identifier resolution.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from teamavailability.config import AppConfig, DataSourceConfig, TeamView
from teamavailability.domain.exceptions import UnknownViewError


def _config() -> AppConfig:
    return AppConfig(
        instructors=[
            {"name": "Alex", "email": "Alex@Example.com"},
            {"name": "Sam", "email": "sam@example.com"},
        ],
        views=[{"name": "Skills lab", "instructor_emails": ["alex@example.com", "sam@example.com"]}],
    )


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "data_source:\n"
            "  json_file: availability.json\n"
            "defaults:\n"
            "  range_days: 7\n"
            "instructors:\n"
            "  - name: Alex\n"
            "    email: alex@example.com\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.defaults.range_days == 7
        assert config.data_source.json_file == tmp_path / "availability.json"
        assert config.instructors[0].email == "alex@example.com"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("instructors: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(path)

    def test_duplicate_instructors_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate instructor email"):
            AppConfig(
                instructors=[
                    {"name": "Alex", "email": "alex@example.com"},
                    {"name": "Alexander", "email": "ALEX@example.com"},
                ]
            )

    def test_duplicate_views_rejected(self):
        view = {"name": "Team", "instructor_emails": ["a@example.com", "b@example.com"]}

        with pytest.raises(ValidationError, match="Duplicate view name"):
            AppConfig(views=[view, dict(view, name="team")])

    def test_resolve_instructors(self):
        config = _config()

        assert config.resolve_instructors(["alex", "SAM", "alex@example.com", "Pat@Example.com"]) == [
            "alex@example.com",
            "sam@example.com",
            "pat@example.com",
        ]

    def test_resolve_reports_all_unknown(self):
        with pytest.raises(ValueError, match="kim, lee"):
            _config().resolve_instructors(["lee", "alex", "kim"])

        with pytest.raises(ValueError, match="No instructors provided"):
            _config().resolve_instructors([])

    def test_find_view(self):
        config = _config()

        assert config.find_view(" skills LAB ").name == "Skills lab"
        with pytest.raises(UnknownViewError, match="Unknown team view: 'Other'"):
            config.find_view("Other")

    def test_display_name(self):
        config = _config()

        assert config.display_name("ALEX@example.com") == "Alex"
        assert config.display_name("pat@example.com") == "pat@example.com"


class TestTeamView:
    """Tests for saved team views."""

    def test_normalises_emails(self):
        view = TeamView(name="  Skills lab ", instructor_emails=["B@x.com ", "a@x.com", "b@x.com"])

        assert view.name == "Skills lab"
        assert view.instructor_emails == ["b@x.com", "a@x.com"]

    def test_requires_two_instructors(self):
        with pytest.raises(ValidationError, match="at least 2"):
            TeamView(name="Solo", instructor_emails=["a@x.com", "A@x.com"])

    def test_requires_name(self):
        with pytest.raises(ValidationError, match="View name is required"):
            TeamView(name="   ", instructor_emails=["a@x.com", "b@x.com"])


class TestDataSourceConfig:
    """Tests for DataSourceConfig."""

    def test_exactly_one_source(self):
        with pytest.raises(ValidationError, match="exactly one"):
            DataSourceConfig()

        with pytest.raises(ValidationError, match="exactly one"):
            DataSourceConfig(json_file=Path("a.json"), api_url="https://db.example.com")

    def test_api_key_from_environment(self, monkeypatch):
        source = DataSourceConfig(api_url="https://db.example.com", api_key_env="TEST_TEAM_KEY")

        monkeypatch.delenv("TEST_TEAM_KEY", raising=False)
        assert source.get_api_key() is None

        monkeypatch.setenv("TEST_TEAM_KEY", "secret")
        assert source.get_api_key() == "secret"
