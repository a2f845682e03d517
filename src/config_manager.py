"""
ConfigManager - Bouncing configuration

Loads the YAML configuration of the bouncing engine.

Architecture:
- config/bouncing.yaml: logging, default animation options, demo markers
  (READ-ONLY at runtime; nothing is persisted back)

The ConfigManager provides:
- Default AnimationConfig (validated)
- Logger level and colour settings
- Demo surface description used by main_asyncio.py
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from models.bouncing import AnimationConfig
from models.enums import LogLevel
from models.errors import BouncingError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "bouncing.yaml"


@dataclass(frozen=True)
class DemoMarker:
    """Marker spawned by the demo runner"""
    name: str
    x: int
    y: int
    cycles: Optional[int] = None
    exclusive: bool = False
    options: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """
    Loads and validates the bouncing configuration.

    Args:
        config_path: Path to YAML config file

    Example:
        config = ConfigManager("config/bouncing.yaml")
        defaults = config.animation_defaults    # AnimationConfig
        configure_logger(config.log_level, config.use_colors)
    """

    REQUIRED_SECTIONS = ("logging", "defaults")

    def __init__(self, config_path=DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self.config_data: Dict[str, Any] = {}
        self.animation_defaults = AnimationConfig()

        self._load_config()

    # =========================================================================
    # Loading
    # =========================================================================

    def _load_config(self):
        """Load YAML configuration file with validation"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"YAML parsing error in {self.config_path}: {e}")

        self._validate_config(self.config_data)
        log.info(f"Loaded config: {self.config_path}")

    def _validate_config(self, cfg: Dict[str, Any]):
        """Validate configuration structure and build typed values"""
        if not isinstance(cfg, dict):
            raise ValueError("Configuration root must be a mapping")

        for section in self.REQUIRED_SECTIONS:
            if section not in cfg:
                raise ValueError(f"Missing section: {section}")

        level = str(cfg["logging"].get("level", "INFO")).upper()
        if level not in LogLevel.__members__:
            raise ValueError(f"Invalid logging.level: {level}")

        defaults = cfg.get("defaults") or {}
        unknown = sorted(set(defaults) - set(AnimationConfig.option_names()))
        if unknown:
            raise ValueError(f"Unknown option(s) in defaults: {', '.join(unknown)}")

        try:
            self.animation_defaults = AnimationConfig.from_mapping(defaults)
        except BouncingError as e:
            raise ValueError(f"Invalid defaults: {e.message}") from e

        for entry in (cfg.get("demo") or {}).get("markers") or []:
            for key in ("name", "x", "y"):
                if key not in entry:
                    raise ValueError(f"Demo marker missing field '{key}': {entry}")

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def log_level(self) -> LogLevel:
        return LogLevel[str(self.config_data["logging"].get("level", "INFO")).upper()]

    @property
    def use_colors(self) -> bool:
        return bool(self.config_data["logging"].get("colors", True))

    @property
    def demo(self) -> Dict[str, Any]:
        return self.config_data.get("demo") or {}

    @property
    def demo_transforms(self) -> bool:
        return bool(self.demo.get("transforms", True))

    @property
    def demo_duration(self) -> Optional[float]:
        """Seconds to run the demo, None = until a signal arrives"""
        value = self.demo.get("duration_s")
        return float(value) if value is not None else None

    @property
    def demo_markers(self) -> List[DemoMarker]:
        return [
            DemoMarker(
                name=str(entry["name"]),
                x=int(entry["x"]),
                y=int(entry["y"]),
                cycles=entry.get("cycles"),
                exclusive=bool(entry.get("exclusive", False)),
                options=dict(entry.get("options") or {}),
            )
            for entry in self.demo.get("markers", []) or []
        ]
