"""Configuration for editing and watching sketches.

Values come from three layers, later ones winning:
- SketchConfig defaults
- the [sketches] table of a TOML file (sketches.toml by default)
- environment variables
"""

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Final

import tomli

from sketches.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE: Final = Path("sketches.toml")

# Environment variable -> SketchConfig field
ENV_VARS: Final = {
    "EDITOR": "editor",
    "SKETCHES_TERMINAL": "terminal",
    "SKETCHES_BACKGROUND": "background",
    "SKETCHES_RELOAD_AFTER_EDIT": "reload_after_editor_quit",
    "SKETCHES_TMPDIR": "tmpdir",
    "SKETCHES_POLL_INTERVAL": "poll_interval",
}

_TRUE_VALUES: Final = {"1", "true", "yes", "on"}
_FALSE_VALUES: Final = {"0", "false", "no", "off"}

EditorSetting = str | Callable[[str], str] | None


@dataclass
class SketchConfig:
    """Settings consumed by the editor launcher and the watcher."""

    # Editor program, or a function mapping the sketch path to a command
    editor: EditorSetting = field(default_factory=lambda: os.environ.get("EDITOR") or None)

    # Optional terminal program, or a function wrapping the editor command
    terminal: EditorSetting = None

    # Spawn the editor without waiting for it to exit
    background: bool = False

    # Reload the sketch once a foreground editor exits
    reload_after_editor_quit: bool = True

    # Directory for temporary sketch files (system default when None)
    tmpdir: Path | None = None

    # Seconds between staleness checks while watching
    poll_interval: float = 1.0


def parse_bool(key: str, value: Any) -> bool:
    """Parse a boolean from TOML or an environment string."""
    if isinstance(value, bool):
        return value

    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(key, value, "expected a boolean")


def parse_interval(key: str, value: Any) -> float:
    """Parse a positive number of seconds."""
    try:
        interval = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(key, value, "expected a number") from e

    if interval <= 0:
        raise ConfigError(key, value, "must be positive")
    return interval


def _coerce(name: str, value: Any) -> Any:
    if name in ("background", "reload_after_editor_quit"):
        return parse_bool(name, value)
    if name == "poll_interval":
        return parse_interval(name, value)
    if name == "tmpdir":
        return Path(value).expanduser() if value else None
    if name in ("editor", "terminal"):
        return value or None
    return value


def _read_toml(path: Path) -> dict[str, Any]:
    """Read the [sketches] table from a TOML file."""
    try:
        data = tomli.loads(path.read_text())
    except tomli.TOMLDecodeError as e:
        raise ConfigError(str(path), path.name, f"invalid TOML: {e}") from e

    table = data.get("sketches", {})
    if not isinstance(table, dict):
        raise ConfigError("sketches", table, "expected a table")
    return table


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> SketchConfig:
    """Build a SketchConfig from defaults, a TOML file and the environment.

    Args:
        path: TOML file to read. Defaults to sketches.toml in the current
            directory, which is skipped when it does not exist.
        env: Environment mapping. Defaults to os.environ.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If a value cannot be parsed.
    """
    env = os.environ if env is None else env
    known = {f.name for f in fields(SketchConfig)}
    values: dict[str, Any] = {}

    config_path = Path(path) if path is not None else DEFAULT_CONFIG_FILE
    if config_path.is_file():
        logger.debug(f"Reading config from {config_path}")
        for key, value in _read_toml(config_path).items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue
            values[key] = _coerce(key, value)
    elif path is not None:
        raise ConfigError("path", str(config_path), "config file not found")

    for var, name in ENV_VARS.items():
        if var in env:
            values[name] = _coerce(name, env[var])

    config = SketchConfig(editor=None)
    for name, value in values.items():
        setattr(config, name, value)
    return config
