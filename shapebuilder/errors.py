"""Exception types raised by the shape builder."""
from __future__ import annotations


class ShapeBuilderError(Exception):
    """Base class for shape builder failures."""


class GeometryError(ShapeBuilderError, RuntimeError):
    """A boolean or conversion step in the geometry adapter failed."""


class ConfigError(ShapeBuilderError, ValueError):
    """Settings could not be parsed or are out of range."""


class DocumentError(ShapeBuilderError, ValueError):
    """Path or document JSON is malformed."""


__all__ = ["ShapeBuilderError", "GeometryError", "ConfigError", "DocumentError"]
