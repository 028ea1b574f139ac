"""Centralized configuration loading."""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_config_cache: Optional[dict] = None
_CONFIG_FILENAME = "configs/config.yaml"


def _find_project_root() -> Path:
    """Walk up from this file to find the directory containing configs/."""
    current = Path(__file__).resolve().parent
    for _ in range(10):  # safety limit
        if (current / "configs").is_dir():
            return current
        current = current.parent
    # Fallback: assume CWD
    return Path.cwd()


def load_config(config_path: Optional[str] = None, *, use_cache: bool = True) -> dict:
    """Load and cache the YAML configuration.

    Args:
        config_path: Override path. If None, auto-discovers configs/config.yaml.
        use_cache: If True (default), returns cached result on subsequent calls.
    """
    global _config_cache
    if use_cache and _config_cache is not None and config_path is None:
        return _config_cache

    if config_path:
        path = Path(config_path)
    else:
        path = _find_project_root() / _CONFIG_FILENAME

    if not path.exists():
        logger.debug(f"Config file not found: {path}")
        result = {}
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                result = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            result = {}

    if config_path is None:
        _config_cache = result
    return result


def clear_config_cache():
    """Clear the cached config (useful for testing)."""
    global _config_cache
    _config_cache = None


@dataclass(frozen=True)
class GraphSettings:
    """Tunable defaults for the knowledge-graph canvas and layout physics."""

    width: int = 800
    height: int = 500
    link_distance: float = 100.0
    charge_strength: float = -300.0
    collision_radius: float = 30.0
    drag_alpha_target: float = 0.3
    alpha_min: float = 0.001
    velocity_decay: float = 0.4
    zoom_min: float = 0.5
    zoom_max: float = 5.0
    seed: int = 0
    max_settle_frames: int = 600

    @property
    def alpha_decay(self) -> float:
        """Per-tick decay that takes alpha from 1 to alpha_min in ~300 ticks."""
        return 1 - self.alpha_min ** (1 / 300)


def load_graph_settings(config: Optional[dict] = None) -> GraphSettings:
    """Read the ``graph:`` section of the config into GraphSettings.

    Args:
        config: Parsed config dict. If None, the cached project config is used.
    """
    if config is None:
        config = load_config()
    section = config.get("graph") or {}
    known = {f.name for f in fields(GraphSettings)}

    values = {}
    for key, value in section.items():
        if key not in known:
            logger.warning(f"Ignoring unknown graph setting '{key}'")
            continue
        values[key] = value

    return GraphSettings(**values)
