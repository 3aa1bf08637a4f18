"""
Configuration file parsing for run defaults.

Configuration is read from up to three YAML files, each overriding the one
before: machine-wide, per-user, and per-project (``.gant-config.yml`` in the
build file's directory or a parent). Command line options override all three.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import platformdirs
import yaml

from pygant.state import Verbosity

__all__ = [
    "GantConfig",
    "ConfigError",
    "PROJECT_CONFIG_FILE",
    "get_user_config_path",
    "get_machine_config_path",
    "find_project_config",
    "parse_config_file",
    "load_config",
]

PROJECT_CONFIG_FILE = ".gant-config.yml"

_KNOWN_KEYS = {"verbosity", "dry_run", "file", "definitions"}


class ConfigError(Exception):
    """
    Raised when a configuration file is invalid.
    """

    pass


@dataclass
class GantConfig:
    """Run defaults gathered from configuration files."""

    verbosity: Optional[Verbosity] = None
    dry_run: Optional[bool] = None
    file: Optional[str] = None
    definitions: dict[str, str] = field(default_factory=dict)

    def merge(self, other: GantConfig) -> GantConfig:
        """Return a new config where values set in `other` win."""
        definitions = dict(self.definitions)
        definitions.update(other.definitions)
        return GantConfig(
            verbosity=other.verbosity if other.verbosity is not None else self.verbosity,
            dry_run=other.dry_run if other.dry_run is not None else self.dry_run,
            file=other.file if other.file is not None else self.file,
            definitions=definitions,
        )


def get_machine_config_path() -> Path:
    """
    Get the path to the machine-level (system-wide) configuration file.

    Uses platformdirs to determine the appropriate site config directory
    for the current platform, then appends 'config.yml'.

    Returns:
        Path to the machine config file (may not exist)
    """
    config_dir = Path(platformdirs.site_config_dir("pygant"))
    return config_dir / "config.yml"


def get_user_config_path() -> Path:
    """
    Get the path to the user-level configuration file.

    Uses platformdirs to determine the appropriate user config directory
    for the current platform, then appends 'config.yml'.

    Returns:
        Path to the user config file (may not exist)
    """
    config_dir: Path = Path(platformdirs.user_config_dir("pygant"))
    return config_dir / "config.yml"


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find .gant-config.yml.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to .gant-config.yml if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        # resolve() can raise OSError on invalid paths or RuntimeError on symlink loops
        return None

    # Maximum depth of 100 prevents infinite loops in edge cases
    max_depth = 100
    for _ in range(max_depth):
        try:
            config_path = current / PROJECT_CONFIG_FILE
            if config_path.exists():
                return config_path
        except OSError:
            # Permission denied or other OS error: keep walking up
            pass

        parent = current.parent
        if parent == current:
            # We've reached the root
            break

        current = parent

    return None


def parse_config_file(path: Path) -> GantConfig:
    """
    Parse a pygant configuration file.

    Empty or missing files are valid and yield an empty GantConfig.

    Args:
        path: Path to the configuration file

    Returns:
        The settings the file defines

    Raises:
        ConfigError: If the config file is invalid (malformed YAML, unknown
                     keys, values of the wrong type)

    Config File Example:

        ```yaml
        verbosity: verbose
        dry_run: false
        file: build.gant
        definitions:
          version: 1.2.0
        ```
    """
    if not path.exists():
        return GantConfig()

    try:
        with open(path, "r") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Error reading config file '{path}': {e}") from e

    if not content.strip():
        return GantConfig()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in config file '{path}': {e}") from e

    if data is None:
        return GantConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Error in config file '{path}': top level must be a mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Error in config file '{path}': unknown key(s): {', '.join(unknown)}")

    config = GantConfig()

    if "verbosity" in data:
        verbosity = data["verbosity"]
        if not isinstance(verbosity, str):
            raise ConfigError(f"Error in config file '{path}': Field 'verbosity' must be a string")
        try:
            config.verbosity = Verbosity.parse(verbosity)
        except ValueError as e:
            raise ConfigError(f"Error in config file '{path}': {e}") from e

    if "dry_run" in data:
        dry_run = data["dry_run"]
        if not isinstance(dry_run, bool):
            raise ConfigError(f"Error in config file '{path}': Field 'dry_run' must be a boolean")
        config.dry_run = dry_run

    if "file" in data:
        file = data["file"]
        if not isinstance(file, str) or not file:
            raise ConfigError(f"Error in config file '{path}': Field 'file' must be a non-empty string")
        config.file = file

    if "definitions" in data:
        definitions = data["definitions"]
        if not isinstance(definitions, dict):
            raise ConfigError(f"Error in config file '{path}': Field 'definitions' must be a dictionary")
        config.definitions = {str(k): _as_string(v) for k, v in definitions.items()}

    return config


def _as_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def load_config(start_dir: Path) -> GantConfig:
    """
    Load and merge machine, user and project configuration.

    Args:
        start_dir: Directory the project config search starts from

    Raises:
        ConfigError: If any of the files is invalid
    """
    config = parse_config_file(get_machine_config_path())
    config = config.merge(parse_config_file(get_user_config_path()))
    project_config = find_project_config(start_dir)
    if project_config is not None:
        config = config.merge(parse_config_file(project_config))
    return config
