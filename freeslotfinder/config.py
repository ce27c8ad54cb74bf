"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator


class DefaultsConfig(BaseModel):
    """Default settings for search."""
    duration_minutes: int = 30
    window_days: int = 1

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure meeting duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    @field_validator("window_days")
    @classmethod
    def validate_window_days(cls, value: int) -> int:
        """Ensure the default search window spans at least one day."""
        if value < 1:
            raise ValueError(f"window_days must be at least 1, got {value}")
        return value


class Colleague(BaseModel):
    """Colleague/Participant configuration."""
    name: str  # Used as alias
    user_id: int


class AppConfig(BaseModel):
    """Application configuration."""
    api_base_url: str = "http://localhost:5000/api/v1"
    email: str = ""
    events_file: Path | None = None
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    colleagues: List[Colleague] = Field(default_factory=list)

    @field_validator("colleagues")
    @classmethod
    def validate_colleagues(cls, value: List[Colleague]) -> List[Colleague]:
        """Ensure colleague aliases and user ids are unique."""
        seen_names: set[str] = set()
        seen_ids: set[int] = set()
        for colleague in value:
            name_key = colleague.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate colleague name detected: {colleague.name}")
            if colleague.user_id in seen_ids:
                raise ValueError(f"Duplicate colleague user_id detected: {colleague.user_id}")
            seen_names.add(name_key)
            seen_ids.add(colleague.user_id)
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

        # Relative events files are resolved against the config file location
        if config.events_file is not None and not config.events_file.is_absolute():
            config.events_file = config_path.parent / config.events_file

        return config

    def find_colleague_by_name(self, name: str) -> Colleague | None:
        """Find a colleague by their name (alias)."""
        for colleague in self.colleagues:
            if colleague.name.lower() == name.lower():
                return colleague
        return None

    def find_colleague_by_id(self, user_id: int) -> Colleague | None:
        """Find a colleague by their user id."""
        for colleague in self.colleagues:
            if colleague.user_id == user_id:
                return colleague
        return None

    def describe_participant(self, user_id: int) -> str:
        """Label a user id with its configured name, if any."""
        colleague = self.find_colleague_by_id(user_id)
        if colleague:
            return f"{colleague.name} ({user_id})"
        return str(user_id)

    def resolve_participant(self, identifier: str) -> int:
        """
        Resolve a participant identifier (name/alias or numeric id) to a user id.

        Args:
            identifier: Name/alias or user id

        Returns:
            User id

        Raises:
            ValueError: If identifier cannot be resolved
        """
        identifier = identifier.strip()

        if identifier.isdigit():
            return int(identifier)

        colleague = self.find_colleague_by_name(identifier)
        if colleague:
            return colleague.user_id

        raise ValueError(
            f"Unknown participant identifier: '{identifier}'. "
            f"Use a user id or a configured name."
        )

    def resolve_participants(self, identifiers: Sequence[str]) -> List[int]:
        """
        Resolve multiple participant identifiers, ensuring uniqueness.

        Args:
            identifiers: Iterable of participant aliases or user ids.

        Returns:
            List of unique user ids, in the order given.
        """
        if not identifiers:
            raise ValueError("No participants provided.")

        resolved_ids: List[int] = []
        unknown_identifiers: List[str] = []

        for identifier in identifiers:
            try:
                user_id = self.resolve_participant(identifier)
            except ValueError:
                unknown_identifiers.append(identifier)
                continue

            if user_id not in resolved_ids:
                resolved_ids.append(user_id)

        if unknown_identifiers:
            missing = ", ".join(sorted(set(unknown_identifiers)))
            raise ValueError(
                f"Unknown participant identifier(s): {missing}. "
                "Ensure they exist in the configuration or provide numeric user ids."
            )

        return resolved_ids


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
