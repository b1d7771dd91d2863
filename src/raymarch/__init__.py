"""Terminal ray marcher: sphere tracing rendered as brightness glyphs."""

from .color import BLUE, CHARMAP, GREEN, RED, WHITE, Color, glyph_for_color
from .engine import Camera, Command, MarchSettings, RayMarcher, RenderEngine
from .errors import DegenerateGeometryError, EmptySceneError, RenderError
from .objects import default_scene, single_sphere_scene
from .scene import Light, Ray, Renderable, Scene, Sphere
from .terminal import BufferSurface, ScriptedInput, TerminalController
from .vector import Vec3

__all__ = [
    "BLUE",
    "CHARMAP",
    "GREEN",
    "RED",
    "WHITE",
    "BufferSurface",
    "Camera",
    "Color",
    "Command",
    "DegenerateGeometryError",
    "EmptySceneError",
    "Light",
    "MarchSettings",
    "Ray",
    "RayMarcher",
    "RenderEngine",
    "RenderError",
    "Renderable",
    "Scene",
    "ScriptedInput",
    "Sphere",
    "TerminalController",
    "Vec3",
    "default_scene",
    "glyph_for_color",
    "single_sphere_scene",
]
