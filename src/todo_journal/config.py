"""Configuration loading for the to-do journal.

Configuration is optional. Values come from, in increasing precedence:
1. Built-in defaults
2. A .toml or .json config file in the working directory (or --config)
3. The TODO_JOURNAL_FILE environment variable
4. The -j/--journal-file command line flag (applied by the CLI)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

# Python 3.11+ has tomllib in stdlib; fall back to tomli for older versions
try:
    import tomllib  # Python 3.11+
except ImportError:  # pragma: no cover
    import tomli as tomllib  # Python <3.11

DEFAULT_JOURNAL_FILE = "journal.json"
DEFAULT_COLUMN_WIDTH = 50
DEFAULT_LOCK_TIMEOUT = 10.0

JOURNAL_FILE_ENV = "TODO_JOURNAL_FILE"

CONFIG_CANDIDATES = (
    "todo_config.toml",
    "todo_config.json",
    ".todo.toml",
    ".todo.json",
)


@dataclass
class TodoConfig:
    """Settings for one invocation of the to-do journal."""

    project_root: Path = field(default_factory=Path.cwd)

    # Relative paths are resolved against project_root
    journal_file: str = DEFAULT_JOURNAL_FILE

    column_width: int = DEFAULT_COLUMN_WIDTH
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    def get_journal_path(self) -> Path:
        """Resolve the journal file path.

        Raises:
            ValueError: If the path has no file name (e.g. "/")
        """
        path = self.project_root / Path(self.journal_file).expanduser()
        if not path.name:
            raise ValueError(f"Journal path {self.journal_file!r} does not name a file")
        return path


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return data


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ValueError(f"Config section [{name}] must be a table")
    return section


def dict_to_config(data: Mapping[str, Any], project_root: Path) -> TodoConfig:
    """Convert dictionary to TodoConfig.

    Raises:
        ValueError: If a value has the wrong type
    """
    config = TodoConfig(project_root=project_root)

    journal = _section(data, "journal")
    if "file" in journal:
        if not isinstance(journal["file"], str) or not journal["file"]:
            raise ValueError("journal.file must be a non-empty string")
        config.journal_file = journal["file"]
    if "lock_timeout" in journal:
        timeout = journal["lock_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 0:
            raise ValueError("journal.lock_timeout must be a non-negative number")
        config.lock_timeout = float(timeout)

    display = _section(data, "display")
    if "width" in display:
        width = display["width"]
        if isinstance(width, bool) or not isinstance(width, int) or width < 0:
            raise ValueError("display.width must be a non-negative integer")
        config.column_width = width

    return config


def find_config_file(project_root: Path) -> Optional[Path]:
    """Find configuration file in project root.

    Search order:
    1. todo_config.toml
    2. todo_config.json
    3. .todo.toml
    4. .todo.json
    """
    for name in CONFIG_CANDIDATES:
        path = project_root / name
        if path.exists():
            return path

    return None


def load_config(
    project_root: Path,
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> TodoConfig:
    """Load configuration for a working directory.

    Args:
        project_root: Directory the journal path is relative to
        config_path: Optional explicit path to config file
        environ: Environment to read overrides from (default: os.environ)

    Returns:
        TodoConfig instance

    Raises:
        ValueError: If the config file is malformed or of an unsupported type
        OSError: If an explicit config file cannot be read
    """
    if environ is None:
        environ = os.environ

    if config_path is None:
        config_path = find_config_file(project_root)

    if config_path is None:
        # No config file - use defaults
        config = TodoConfig(project_root=project_root)
    else:
        suffix = config_path.suffix.lower()
        if suffix == ".toml":
            config = dict_to_config(load_toml_config(config_path), project_root)
        elif suffix == ".json":
            config = dict_to_config(load_json_config(config_path), project_root)
        else:
            raise ValueError(f"Unsupported config file type: {suffix}")

    env_journal = environ.get(JOURNAL_FILE_ENV)
    if env_journal:
        config.journal_file = env_journal

    return config
