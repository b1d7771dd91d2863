"""Exceptions raised by the rendering core."""


class RenderError(Exception):
    """Base class for rendering failures."""


class DegenerateGeometryError(RenderError, ValueError):
    """A geometric operation was asked to work on a zero-length vector."""


class EmptySceneError(RenderError, ValueError):
    """A nearest-object query ran against a scene with no objects."""
