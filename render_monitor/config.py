from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_BLENDER_COMMAND = "/Applications/Blender/blender.app/Contents/MacOS/blender"
DEFAULT_CONFIG_PATH = "render-monitor.yaml"


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


@dataclass(frozen=True)
class RunnerOptions:
    """Parameters of one render job, shared read-only by runner and dashboard."""

    input_file: str
    output_dir: str
    frame_start: int
    frame_end: int


@dataclass
class BlenderConfig:
    """Blender executable location."""

    command: str = DEFAULT_BLENDER_COMMAND


@dataclass
class DisplayConfig:
    """Dashboard appearance and teardown timing."""

    grace_period_seconds: float = 3.0
    bar_width: int = 30


@dataclass
class RenderConfig:
    """How strictly render output must follow the saved-then-timed sequence."""

    strict_correlation: bool = True


@dataclass
class DebugConfig:
    """Debug mode settings."""

    enabled: bool = False
    trace: bool = False
    verbose: bool = False


@dataclass
class AppConfig:
    """Top-level application configuration aggregating all subsections."""

    blender: BlenderConfig = field(default_factory=BlenderConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


def _section(raw: dict, name: str) -> dict:
    # `or {}` fallback handles YAML null values for optional sections
    value = raw.get(name, {}) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping")
    return value


def load_config(path: str) -> AppConfig:
    """Load and validate application configuration from a YAML file.

    Every section and field is optional; missing values fall back to the
    dataclass defaults.

    Args:
        path: Filesystem path to the YAML configuration file.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        ConfigError: If the file does not exist, is not a YAML mapping,
            or holds out-of-range values.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    blender_raw = _section(raw, "blender")
    display_raw = _section(raw, "display")
    render_raw = _section(raw, "render")
    debug_raw = _section(raw, "debug")

    try:
        grace = float(display_raw.get("grace_period_seconds", 3.0))
        bar_width = int(display_raw.get("bar_width", 30))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid display settings: {exc}") from exc
    if grace < 0:
        raise ConfigError("display.grace_period_seconds must not be negative")
    if bar_width <= 0:
        raise ConfigError("display.bar_width must be positive")

    command = blender_raw.get("command", DEFAULT_BLENDER_COMMAND)
    if not command:
        raise ConfigError("blender.command must not be empty")

    logger.debug("Loaded config from %s", path)
    logger.debug("Blender command=%s", command)

    return AppConfig(
        blender=BlenderConfig(
            command=str(Path(command).expanduser()) if "~" in command else command,
        ),
        display=DisplayConfig(
            grace_period_seconds=grace,
            bar_width=bar_width,
        ),
        render=RenderConfig(
            strict_correlation=bool(render_raw.get("strict_correlation", True)),
        ),
        debug=DebugConfig(
            enabled=bool(debug_raw.get("enabled", False)),
            trace=bool(debug_raw.get("trace", False)),
            verbose=bool(debug_raw.get("verbose", False)),
        ),
    )
