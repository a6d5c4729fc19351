"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import List, Optional, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import UnknownViewError
from .domain.models import normalize_email
from .domain.overlap_calculator import MIN_INSTRUCTORS, normalize_emails

DEFAULT_API_KEY_ENV = "TEAMAVAILABILITY_API_KEY"


class DefaultsConfig(BaseModel):
    """Default settings for searches."""
    range_days: int = 14

    @field_validator("range_days")
    @classmethod
    def validate_range_days(cls, value: int) -> int:
        """Ensure the default search range is positive."""
        if value <= 0:
            raise ValueError("range_days must be greater than zero")
        return value


class Instructor(BaseModel):
    """Instructor configuration."""
    name: str  # Used as alias
    email: str

    @field_validator("email")
    @classmethod
    def normalize(cls, value: str) -> str:
        return normalize_email(value)


class TeamView(BaseModel):
    """A named, reusable selection of instructors."""
    name: str
    instructor_emails: List[str]

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Names are trimmed and must not be blank."""
        value = value.strip()
        if not value:
            raise ValueError("View name is required")
        return value

    @field_validator("instructor_emails")
    @classmethod
    def validate_emails(cls, value: List[str]) -> List[str]:
        """Emails are normalised, de-duplicated and at least two are required."""
        emails = normalize_emails(value)
        if len(emails) < MIN_INSTRUCTORS:
            raise ValueError(
                f"A team view needs at least {MIN_INSTRUCTORS} instructor emails"
            )
        return emails


class DataSourceConfig(BaseModel):
    """Where availability rows come from."""
    json_file: Optional[Path] = None
    api_url: Optional[str] = None
    api_key_env: str = DEFAULT_API_KEY_ENV
    timeout_seconds: int = 30

    @model_validator(mode="after")
    def validate_single_source(self) -> "DataSourceConfig":
        """Exactly one of json_file and api_url must be configured."""
        if (self.json_file is None) == (self.api_url is None):
            raise ValueError("Configure exactly one of data_source.json_file or data_source.api_url")
        return self

    def get_api_key(self) -> Optional[str]:
        """Read the bearer token from the configured environment variable."""
        return os.environ.get(self.api_key_env) or None


class AppConfig(BaseModel):
    """Application configuration."""
    data_source: Optional[DataSourceConfig] = None
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    instructors: List[Instructor] = Field(default_factory=list)
    views: List[TeamView] = Field(default_factory=list)

    @field_validator("instructors")
    @classmethod
    def validate_instructors(cls, value: List[Instructor]) -> List[Instructor]:
        """Ensure instructor aliases and emails are unique."""
        seen_names: set[str] = set()
        seen_emails: set[str] = set()
        for instructor in value:
            name_key = instructor.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate instructor name detected: {instructor.name}")
            if instructor.email in seen_emails:
                raise ValueError(f"Duplicate instructor email detected: {instructor.email}")
            seen_names.add(name_key)
            seen_emails.add(instructor.email)
        return value

    @field_validator("views")
    @classmethod
    def validate_views(cls, value: List[TeamView]) -> List[TeamView]:
        """Ensure saved view names are unique."""
        seen: set[str] = set()
        for view in value:
            key = view.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate view name detected: {view.name}")
            seen.add(key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative data files are resolved against the config file location
        source = config.data_source
        if source and source.json_file and not source.json_file.is_absolute():
            source.json_file = config_path.parent / source.json_file

        return config

    def find_instructor_by_name(self, name: str) -> Instructor | None:
        """Find an instructor by their name (alias)."""
        for instructor in self.instructors:
            if instructor.name.lower() == name.lower():
                return instructor
        return None

    def find_instructor_by_email(self, email: str) -> Instructor | None:
        """Find an instructor by their email."""
        key = normalize_email(email)
        for instructor in self.instructors:
            if instructor.email == key:
                return instructor
        return None

    def display_name(self, email: str) -> str:
        """Configured name for an email, or the email itself."""
        instructor = self.find_instructor_by_email(email)
        return instructor.name if instructor else email

    def resolve_instructor(self, identifier: str) -> str:
        """
        Resolve an instructor identifier (name/alias or email) to an email address.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        if "@" in identifier:
            return normalize_email(identifier)

        instructor = self.find_instructor_by_name(identifier)
        if instructor:
            return instructor.email

        raise ValueError(
            f"Unknown instructor identifier: '{identifier}'. "
            f"Use an email address or a configured name."
        )

    def resolve_instructors(self, identifiers: Sequence[str]) -> List[str]:
        """
        Resolve multiple instructor identifiers, ensuring uniqueness.

        Every unknown identifier is reported in a single error.
        """
        if not identifiers:
            raise ValueError("No instructors provided.")

        resolved_emails: List[str] = []
        unknown_identifiers: List[str] = []

        for identifier in identifiers:
            try:
                email = self.resolve_instructor(identifier)
            except ValueError:
                unknown_identifiers.append(identifier)
                continue

            if email not in resolved_emails:
                resolved_emails.append(email)

        if unknown_identifiers:
            missing = ", ".join(sorted(set(unknown_identifiers)))
            raise ValueError(
                f"Unknown instructor identifier(s): {missing}. "
                "Ensure they exist in the configuration or provide valid email addresses."
            )

        return resolved_emails

    def find_view(self, name: str) -> TeamView:
        """
        Look up a saved view by name (case-insensitive).

        Raises:
            UnknownViewError: If no view with that name is configured
        """
        for view in self.views:
            if view.name.lower() == name.strip().lower():
                return view
        raise UnknownViewError(f"Unknown team view: '{name}'")


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
