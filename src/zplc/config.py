"""Configuration loader for the label compiler.

Loads ``defaults.yaml`` (shipped with the package) and an optional user
file on top of it into a frozen ``CompilerConfig``.  Unknown keys and
invalid values are rejected with ``ConfigError``.

Usage::

    from zplc.config import load_config
    cfg = load_config()                     # packaged defaults
    cfg = load_config("/etc/zplc.yaml")     # defaults + overrides
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from zplc.model.nodes import PageGeometry, Unit, ZplcError

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).with_name("defaults.yaml")


class ConfigError(ZplcError):
    """Raised when configuration validation fails."""


@dataclass(frozen=True)
class LabelSize:
    """A named physical label size."""

    name: str
    width: float
    height: float
    unit: Unit

    def page(self, dpi: int) -> PageGeometry:
        """Return the page geometry of this size at *dpi*."""
        return PageGeometry.from_physical(self.width, self.height, self.unit, dpi)


LABEL_SIZE_PRESETS: tuple[LabelSize, ...] = (
    LabelSize("4x6 Shipping", 4, 6, Unit.INCH),
    LabelSize("2x1 Part Label", 2, 1, Unit.INCH),
    LabelSize("100x50mm", 100, 50, Unit.MILLIMETER),
    LabelSize("50x25mm Small", 50, 25, Unit.MILLIMETER),
)


def find_preset(name: str) -> LabelSize:
    """Return the preset called *name* (case-insensitive).

    Raises
    ------
    ConfigError
        If no preset has that name.
    """
    for preset in LABEL_SIZE_PRESETS:
        if preset.name.lower() == name.strip().lower():
            return preset
    available = ", ".join(p.name for p in LABEL_SIZE_PRESETS)
    raise ConfigError(f"Unknown label size {name!r}. Available: {available}")


@dataclass(frozen=True)
class CompilerConfig:
    """Compiler and preview settings.

    Parameters
    ----------
    dpi:
        Default printer resolution.
    label_size:
        Name of the default label size preset.
    guide_color:
        Stroke colour of designer grid guides, skipped when compiling.
    font_scale:
        Designer font size to ZPL font height multiplier.
    label_home:
        Emit ``^LH0,0`` in every format.
    preview_url:
        Base URL of the Labelary rendering API.
    preview_timeout_s:
        HTTP timeout for preview requests.
    """

    dpi: int = 203
    label_size: str = "4x6 Shipping"
    guide_color: str = "#f0f0f0"
    font_scale: float = 1.5
    label_home: bool = False
    preview_url: str = "https://api.labelary.com/v1"
    preview_timeout_s: float = 10.0

    def default_page(self) -> PageGeometry:
        """Page geometry of ``label_size`` at ``dpi``."""
        return find_preset(self.label_size).page(self.dpi)


def _validate(values: dict[str, Any]) -> CompilerConfig:
    known = {f.name for f in fields(CompilerConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    dpi = values.get("dpi", 203)
    if isinstance(dpi, bool) or not isinstance(dpi, int) or dpi <= 0:
        raise ConfigError(f"dpi must be a positive integer, got {dpi!r}")
    font_scale = values.get("font_scale", 1.5)
    if not isinstance(font_scale, (int, float)) or font_scale <= 0:
        raise ConfigError(f"font_scale must be positive, got {font_scale!r}")
    timeout = values.get("preview_timeout_s", 10.0)
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f"preview_timeout_s must be positive, got {timeout!r}")
    for key in ("guide_color", "label_size", "preview_url"):
        if key in values and not isinstance(values[key], str):
            raise ConfigError(f"{key} must be a string, got {values[key]!r}")
    if "label_home" in values and not isinstance(values["label_home"], bool):
        raise ConfigError(f"label_home must be true or false, got {values['label_home']!r}")

    config = CompilerConfig(**values)
    find_preset(config.label_size)
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    return data


def load_config(path: str | Path | None = None) -> CompilerConfig:
    """Load packaged defaults, then overlay the file at *path* if given.

    Raises
    ------
    ConfigError
        If a file cannot be read or holds invalid values.
    """
    values = _read_yaml(DEFAULTS_PATH)
    if path is not None:
        overrides = _read_yaml(Path(path))
        logger.debug("Loaded %d config override(s) from %s", len(overrides), path)
        values.update(overrides)
    return _validate(values)
