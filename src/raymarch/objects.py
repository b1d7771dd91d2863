"""Predefined scenes."""

from __future__ import annotations

from .color import RED, WHITE, Color
from .scene import Light, Scene, Sphere
from .vector import Vec3


def default_scene() -> Scene:
    """Return the start-up scene: two red spheres lit from above-left."""

    return Scene(
        objects=[
            Sphere(Vec3(0.0, 0.0, 50.0), 5.0, RED),
            Sphere(Vec3(-20.0, 0.0, 30.0), 2.0, RED),
        ],
        lights=[Light(Vec3(-5.0, -20.0, 10.0), WHITE)],
    )


def single_sphere_scene(
    center: Vec3 = Vec3(0.0, 0.0, 50.0),
    radius: float = 5.0,
    *,
    color: Color = RED,
    light_position: Vec3 = Vec3(-5.0, -20.0, 10.0),
    light_color: Color = WHITE,
) -> Scene:
    """Return one sphere and one light, the smallest scene worth looking at."""

    return Scene(
        objects=[Sphere(center, radius, color)],
        lights=[Light(light_position, light_color)],
    )


SCENES = {
    "default": default_scene,
    "single": single_sphere_scene,
}
