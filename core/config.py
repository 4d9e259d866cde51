"""
Configuration loader.

Reads an optional config.toml (next to main.py, or a path passed on the command line)
into frozen dataclasses, one per section. Missing files or fields fall back to the
defaults below; invalid values raise ValueError at load time.

    [capture]
    device = 0
    width = 320
    height = 240
    datatype = "CV_8UC3"

    [edges]
    low_threshold = 300.0
    high_threshold = 100.0
    aperture = 3
    l2_gradient = true

    [app]
    seed_label = "Confused face when the app launches..."
    log_level = "INFO"
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from core.models import SUPPORTED_DATATYPES, CaptureParams

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = _PROJECT_ROOT / "config.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class EdgeConfig:
    """Canny parameters for the edge rendering."""

    low_threshold: float = 300.0
    high_threshold: float = 100.0
    aperture: int = 3
    l2_gradient: bool = True


@dataclass(frozen=True)
class AppConfig:
    seed_label: str = "Confused face when the app launches..."
    log_level: str = "INFO"


@dataclass(frozen=True)
class Config:
    capture: CaptureParams = field(default_factory=CaptureParams)
    edges: EdgeConfig = field(default_factory=EdgeConfig)
    app: AppConfig = field(default_factory=AppConfig)


_FIELD_TYPES = {"int": int, "float": float, "str": str, "bool": bool}


def _check_type(name: str, key: str, value: Any, type_name: str) -> Any:
    """Return `value` if it fits the field type; ints are accepted for float fields."""
    expected = _FIELD_TYPES.get(type_name)
    if expected is None:
        return value
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    # bool is an int subclass; keep them apart
    if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
        raise ValueError(
            f"{name}.{key} must be {type_name}, got {type(value).__name__} {value!r}"
        )
    return value


def _section(cls: type, data: Any, name: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"[{name}] must be a table, got {type(data).__name__} {data!r}")
    fields = cls.__dataclass_fields__
    unknown = set(data) - set(fields)
    if unknown:
        logger.warning("Ignoring unknown keys in [%s]: %s", name, ", ".join(sorted(unknown)))
    return cls(**{
        k: _check_type(name, k, v, str(fields[k].type))
        for k, v in data.items()
        if k in fields
    })


def validate(config: Config) -> Config:
    """Raise ValueError on values the capture pipeline cannot work with."""
    cap = config.capture
    if cap.device < 0:
        raise ValueError(f"capture.device must be >= 0, got {cap.device}")
    if cap.width <= 0 or cap.height <= 0:
        raise ValueError(f"capture size must be positive, got {cap.width}x{cap.height}")
    if cap.datatype not in SUPPORTED_DATATYPES:
        raise ValueError(
            f"capture.datatype must be one of {SUPPORTED_DATATYPES}, got {cap.datatype!r}"
        )
    if config.edges.aperture not in (3, 5, 7):
        raise ValueError(f"edges.aperture must be 3, 5 or 7, got {config.edges.aperture}")
    if config.app.log_level.upper() not in _LOG_LEVELS:
        raise ValueError(f"app.log_level must be one of {_LOG_LEVELS}, got {config.app.log_level!r}")
    return config


def load_config(path: str | Path | None = None) -> Config:
    """Load and validate config. A missing file yields the defaults."""
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not path.is_file():
        logger.debug("No config file at %s, using defaults", path)
        return validate(Config())
    with path.open("rb") as f:
        raw = tomllib.load(f)
    config = Config(
        capture=_section(CaptureParams, raw.get("capture", {}), "capture"),
        edges=_section(EdgeConfig, raw.get("edges", {}), "edges"),
        app=_section(AppConfig, raw.get("app", {}), "app"),
    )
    logger.info("Loaded config from %s", path)
    return validate(config)


def with_overrides(config: Config, **capture_overrides: Any) -> Config:
    """Apply non-None command-line overrides to the [capture] section."""
    changes = {k: v for k, v in capture_overrides.items() if v is not None}
    if not changes:
        return config
    return validate(replace(config, capture=replace(config.capture, **changes)))
