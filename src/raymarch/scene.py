"""Scene model: rays, lights and renderable objects."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from .color import Color
from .errors import EmptySceneError
from .vector import Vec3

AMBIENT_FACTOR = 0.3
DIFFUSE_FACTOR = 0.5


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray whose direction keeps the length produced by the projection."""

    origin: Vec3
    direction: Vec3

    def step(self, point: Vec3, distance: float) -> Vec3:
        """Advance ``point`` by ``distance`` world units along the ray."""

        return point.add(self.direction.normalize().scale(distance))


@dataclass(frozen=True, slots=True)
class Light:
    """Point light without distance attenuation."""

    position: Vec3
    color: Color


class Renderable(abc.ABC):
    """Anything the marcher can find and shade."""

    @abc.abstractmethod
    def distance(self, point: Vec3) -> float:
        """Signed distance from ``point`` to the surface."""

    @abc.abstractmethod
    def shade(self, point: Vec3, lights: Sequence[Light]) -> Color:
        """Colour of the surface at ``point`` lit by ``lights``."""


@dataclass(frozen=True)
class Sphere(Renderable):
    center: Vec3
    radius: float
    color: Color

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")

    def normal(self, point: Vec3) -> Vec3:
        return point.sub(self.center).normalize()

    def distance(self, point: Vec3) -> float:
        return self.center.sub(point).magnitude() - self.radius

    def shade(self, point: Vec3, lights: Sequence[Light]) -> Color:
        normal = self.normal(point)
        color = self.color.scale(AMBIENT_FACTOR)
        for light in lights:
            lambert = light.position.sub(point).normalize().dot(normal)
            lambert = max(0.0, min(1.0, lambert))
            color = color.add(light.color.scale(lambert * DIFFUSE_FACTOR))
        return color


class Scene:
    """Objects and lights, fixed after construction."""

    def __init__(self, objects: Iterable[Renderable], lights: Iterable[Light]) -> None:
        self._objects: Tuple[Renderable, ...] = tuple(objects)
        self._lights: Tuple[Light, ...] = tuple(lights)

    @property
    def objects(self) -> Tuple[Renderable, ...]:
        return self._objects

    @property
    def lights(self) -> Tuple[Light, ...]:
        return self._lights

    def __len__(self) -> int:
        return len(self._objects)

    def find_nearest(self, point: Vec3) -> Tuple[Renderable, float]:
        """Return the object closest to ``point`` and its distance.

        Ties keep the earlier object: a later object only wins when it is
        strictly closer.
        """

        if not self._objects:
            raise EmptySceneError("Scene has no objects to query")

        nearest = self._objects[0]
        nearest_distance = nearest.distance(point)
        for obj in self._objects[1:]:
            distance = obj.distance(point)
            if distance < nearest_distance:
                nearest, nearest_distance = obj, distance
        return nearest, nearest_distance
