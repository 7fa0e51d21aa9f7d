"""Tunable thresholds and style defaults for the shape builder."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .errors import ConfigError

MIN_BOUNDS_SIZE = 0.1
MIN_AREA = 0.1

_ENV_PREFIX = "SHAPEBUILDER_"


@dataclass(frozen=True)
class ShapeBuilderSettings:
    """Validity thresholds, curve flattening density and commit style defaults."""

    min_bounds_size: float = MIN_BOUNDS_SIZE
    min_area: float = MIN_AREA
    curve_samples: int = 16
    stroke_width: float = 1.0
    stroke_color: str = "#000000"
    stroke_opacity: float = 1.0
    fill_color: str = "none"
    fill_opacity: float = 1.0
    exit_tool: str = "select"

    def __post_init__(self) -> None:
        if self.min_bounds_size < 0.0 or self.min_area < 0.0:
            raise ConfigError("Validity thresholds must be non-negative")
        if self.curve_samples < 1:
            raise ConfigError("curve_samples must be at least 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShapeBuilderSettings":
        """Build settings from ``SHAPEBUILDER_*`` environment variables."""
        env = os.environ if environ is None else environ
        overrides = {}
        for name, cast in (("min_bounds_size", float), ("min_area", float), ("curve_samples", int)):
            raw = env.get(_ENV_PREFIX + name.upper())
            if raw is None or raw == "":
                continue
            try:
                overrides[name] = cast(raw)
            except ValueError as exc:
                raise ConfigError(f"Invalid value for {_ENV_PREFIX}{name.upper()}: {raw!r}") from exc
        return replace(cls(), **overrides)


DEFAULT_SETTINGS = ShapeBuilderSettings()


__all__ = ["MIN_AREA", "MIN_BOUNDS_SIZE", "ShapeBuilderSettings", "DEFAULT_SETTINGS"]
