"""
JSON-based project configuration for solid_revolution.

Allows overriding default configuration values through:
1. .revolve.json file in the current directory
2. .revolve.json file in the scene file's directory
3. Explicit config file path via CLI

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (config.py)
2. User config (~/.revolve.json)
3. Project config (./.revolve.json)
4. CLI arguments

Example .revolve.json:
{
    "resolution": {
        "strategy": "continuous",
        "x_segments": 200,
        "angular_segments": 96
    },
    "output": {
        "formats": ["stl", "svg"],
        "stl_binary": true
    },
    "drawing": {
        "scale": 20.0,
        "upper_color": "#1f77b4"
    }
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from solid_revolution.config import (
    DEFAULT_ANGULAR_SEGMENTS,
    DEFAULT_DISK_COUNT,
    DEFAULT_QUADRATURE_INTERVALS,
    DEFAULT_X_SEGMENTS,
    STRATEGIES,
    STRATEGY_CONTINUOUS,
)

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILENAME = ".revolve.json"

OUTPUT_FORMATS = ("stl", "svg", "dxf")

T = TypeVar('T')


@dataclass(frozen=True)
class ResolutionConfig:
    """Discretization settings passed explicitly into every request.

    Attributes:
        strategy: "continuous" (lathe) or "disks" (Riemann slabs)
        x_segments: Display sampling segments, also the lathe x-resolution
        angular_segments: Angular steps of the sweep
        disk_count: Number of slabs for the disk strategy
        quadrature_intervals: Sub-intervals for volume/area integration
    """
    strategy: str = STRATEGY_CONTINUOUS
    x_segments: int = DEFAULT_X_SEGMENTS
    angular_segments: int = DEFAULT_ANGULAR_SEGMENTS
    disk_count: int = DEFAULT_DISK_COUNT
    quadrature_intervals: int = DEFAULT_QUADRATURE_INTERVALS

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown strategy {self.strategy!r}, expected one of {STRATEGIES}"
            )
        for name in ('x_segments', 'angular_segments', 'disk_count', 'quadrature_intervals'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    def with_overrides(self, **overrides: Any) -> 'ResolutionConfig':
        """Copy with the given non-None fields replaced."""
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ResolutionConfig(**values)


@dataclass
class OutputConfig:
    """Output file configuration."""
    formats: List[str] = field(default_factory=lambda: ["stl"])
    prefix: str = ""
    suffix: str = ""
    output_dir: str = ""
    stl_binary: bool = True


@dataclass
class DrawingConfig:
    """Profile drawing (SVG/DXF) configuration."""
    scale: float = 40.0  # drawing units per model unit
    margin: float = 20.0
    stroke_width: float = 1.5
    upper_color: str = "#d62728"
    lower_color: str = "#1f77b4"
    axis_color: str = "#7f7f7f"
    show_axis: bool = True
    show_bounds: bool = True


def _section_from_dict(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
    """Build a section dataclass, ignoring unknown keys."""
    if not data:
        return cls()
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    drawing: DrawingConfig = field(default_factory=DrawingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to JSON file.

        Args:
            path: Output file path
        """
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            ProjectConfig instance

        Raises:
            ValueError: If the resolution section is invalid
        """
        config = cls(
            resolution=_section_from_dict(ResolutionConfig, data.get('resolution')),
            output=_section_from_dict(OutputConfig, data.get('output')),
            drawing=_section_from_dict(DrawingConfig, data.get('drawing')),
        )

        unknown = [f for f in config.output.formats if f not in OUTPUT_FORMATS]
        if unknown:
            logger.warning("Ignoring unknown output formats: %s", ", ".join(unknown))
            config.output.formats = [f for f in config.output.formats if f in OUTPUT_FORMATS]

        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    scene_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find configuration file using search hierarchy.

    Search order:
    1. Explicit config path (if provided)
    2. .revolve.json in the scene file's directory
    3. .revolve.json in current working directory
    4. ~/.revolve.json in user's home directory

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    if scene_path:
        scene_config = Path(scene_path).parent / CONFIG_FILENAME
        if scene_config.exists():
            return scene_config

    cwd_config = Path.cwd() / CONFIG_FILENAME
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / CONFIG_FILENAME
    if home_config.exists():
        return home_config

    return None


def _load_or_none(config_path: Path) -> Optional[ProjectConfig]:
    try:
        return ProjectConfig.load(config_path)
    except (ValueError, TypeError, IOError) as e:
        logger.error("Failed to load config %s: %s", config_path, e)
        return None


def load_config(
    scene_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration with fallback to defaults.

    A user config (~/.revolve.json) is layered under the project config
    found by find_config_file(): non-default project values win.

    Args:
        scene_path: Path to the scene file being processed
        explicit_config: Explicitly specified config path

    Returns:
        ProjectConfig instance (defaults if no usable config file found)
    """
    home_path = Path.home() / CONFIG_FILENAME
    user_config = _load_or_none(home_path) if home_path.exists() else None

    config_path = find_config_file(scene_path, explicit_config)
    if config_path is None or config_path.resolve() == home_path.resolve():
        return user_config or ProjectConfig()

    project_config = _load_or_none(config_path)
    if project_config is None:
        return user_config or ProjectConfig()
    if user_config is None:
        return project_config

    logger.debug("Layering %s over %s", config_path, home_path)
    return merge_configs(user_config, project_config)


def _overlay(base: Any, override: Any, default: Any) -> Dict[str, Any]:
    values = asdict(base)
    for key, value in asdict(override).items():
        if value != getattr(default, key):
            values[key] = value
    return values


def merge_configs(base: ProjectConfig, override: ProjectConfig) -> ProjectConfig:
    """Merge two configurations, with override taking precedence.

    Only non-default values from override are applied.
    """
    return ProjectConfig(
        resolution=ResolutionConfig(
            **_overlay(base.resolution, override.resolution, ResolutionConfig())
        ),
        output=OutputConfig(**_overlay(base.output, override.output, OutputConfig())),
        drawing=DrawingConfig(**_overlay(base.drawing, override.drawing, DrawingConfig())),
    )


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> None:
    """Create a sample configuration file with documentation.

    Args:
        path: Output file path (default: .revolve.json)
    """
    sample = {
        "_comment": "Solid of revolution generator configuration",
        "_version": "1.0",
        "resolution": {
            "_comment": "strategy: continuous | disks",
            "strategy": STRATEGY_CONTINUOUS,
            "x_segments": DEFAULT_X_SEGMENTS,
            "angular_segments": DEFAULT_ANGULAR_SEGMENTS,
            "disk_count": DEFAULT_DISK_COUNT,
            "quadrature_intervals": DEFAULT_QUADRATURE_INTERVALS,
        },
        "output": {
            "_comment": "formats: any of stl, svg, dxf",
            "formats": ["stl"],
            "prefix": "",
            "suffix": "",
            "output_dir": "",
            "stl_binary": True,
        },
        "drawing": {
            "_comment": "Profile drawing settings",
            "scale": 40.0,
            "margin": 20.0,
            "stroke_width": 1.5,
            "upper_color": "#d62728",
            "lower_color": "#1f77b4",
        },
    }

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
