"""
Configuration management for jiranch
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.markup import escape

from jiranch.utils import console, ensure_private_dir, mask_secret

logger = logging.getLogger("jiranch.config")

CONFIG_FILE_NAME = "config.yml"

# Config attribute -> key written to config.yml
YAML_KEYS = {
    "jira_base_url": "jiraBaseURL",
    "username": "username",
    "token": "token",
    "short_name": "shortName",
}

# Alternate spellings accepted when reading
_YAML_ALIASES = {
    "username": ("Username",),
    "token": ("Token",),
}

# Prompt label for each field, in the order they are asked
PROMPTS = {
    "jira_base_url": "JIRA base URL",
    "username": "JIRA user name",
    "token": "JIRA API token",
    "short_name": "Short name",
}


class ConfigError(Exception):
    """Raised when the config file cannot be read or written."""


class ConfigNotFoundError(ConfigError):
    """Raised when no config file exists yet."""

    def __init__(self, path: Path):
        super().__init__(f"Config file not found: {path}")
        self.path = path


@dataclass
class Config:
    """jiranch configuration."""

    # Base URL of the Jira instance (e.g., "https://company.atlassian.net")
    jira_base_url: str = ""

    # Jira account used for basic auth
    username: str = ""

    # Jira API token, used as the basic auth password
    token: str = ""

    # Project abbreviation that prefixes every branch name
    short_name: str = ""

    def missing_fields(self) -> List[str]:
        """Return the names of fields that are still empty."""
        return [f.name for f in fields(self) if not getattr(self, f.name)]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_dict(self) -> Dict[str, str]:
        """Convert config to the dictionary stored in config.yml."""
        return {key: getattr(self, attr) for attr, key in YAML_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from a dictionary loaded from config.yml."""
        values = {}
        for attr, key in YAML_KEYS.items():
            value = data.get(key)
            for alias in _YAML_ALIASES.get(attr, ()):
                if value is None:
                    value = data.get(alias)
            values[attr] = "" if value is None else str(value)
        return cls(**values)


def get_config_path(config_dir: Path) -> Path:
    """Get the path to the config file inside the data directory."""
    return Path(config_dir) / CONFIG_FILE_NAME


def load_config(config_dir: Path) -> Config:
    """
    Load configuration from <config_dir>/config.yml.

    Raises:
        ConfigNotFoundError: If the config file does not exist
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    config_path = get_config_path(config_dir)

    if not config_path.exists():
        raise ConfigNotFoundError(config_path)

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid config in {config_path}: expected a mapping, got {type(data).__name__}"
        )

    config = Config.from_dict(data)
    logger.debug(f"Loaded config from {config_path}")
    return config


def save_config(config: Config, config_dir: Path) -> Path:
    """
    Save configuration to <config_dir>/config.yml.

    The directory is created with mode 0700 and the file written with
    mode 0600, since it holds the API token.

    Returns:
        Path of the written config file

    Raises:
        ConfigError: If the directory or file cannot be written
    """
    config_path = get_config_path(config_dir)

    try:
        ensure_private_dir(config_path.parent)
        content = yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False)

        fd = os.open(config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(config_path, 0o600)
    except OSError as e:
        raise ConfigError(f"Cannot write {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot serialize config: {e}") from e

    logger.debug(f"Saved config to {config_path}")
    return config_path


def _prompt(label: str, default: str = "", secret: bool = False) -> str:
    """Ask for one value, keeping `default` when the answer is empty."""
    if default:
        shown = mask_secret(default) if secret else default
        label = f"{label} {escape(f'[{shown}]')}"
    answer = console.input(f"{label}: ", password=secret).strip()
    return answer or default


def init_config(config_dir: Path, existing: Optional[Config] = None) -> Config:
    """
    Capture configuration with interactive prompts and save it.

    Values from `existing` are offered as defaults so re-running the
    command only needs the fields that change.

    Raises:
        ConfigError: If the config file cannot be written
        EOFError, KeyboardInterrupt: If input ends or is interrupted
    """
    existing = existing or Config()

    console.print("\n[bold blue]jiranch configuration[/bold blue]\n")

    values = {
        attr: _prompt(label, getattr(existing, attr), secret=(attr == "token"))
        for attr, label in PROMPTS.items()
    }
    config = Config(**values)

    save_config(config, config_dir)
    return config
