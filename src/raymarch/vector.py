"""Immutable 3D vector used throughout the ray marcher."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import DegenerateGeometryError

_MIN_LENGTH = 1e-12


@dataclass(frozen=True, slots=True)
class Vec3:
    """Lightweight immutable 3D vector."""

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> "Vec3":
        return cls(0.0, 0.0, 0.0)

    def scale(self, s: float) -> "Vec3":
        return Vec3(self.x * s, self.y * s, self.z * s)

    def add(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def dotself(self) -> float:
        return self.dot(self)

    def magnitude(self) -> float:
        return math.sqrt(self.dotself())

    def normalize(self) -> "Vec3":
        length = self.magnitude()
        if length <= _MIN_LENGTH:
            raise DegenerateGeometryError(f"Cannot normalize zero-length vector {self}")
        return self.scale(1.0 / length)

    def __add__(self, other: "Vec3") -> "Vec3":
        return self.add(other)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return self.sub(other)

    def __mul__(self, scalar: float) -> "Vec3":
        if not isinstance(scalar, (int, float)):
            raise TypeError("Vec3 can only be multiplied by a scalar")
        return self.scale(scalar)

    def __rmul__(self, scalar: float) -> "Vec3":
        return self.__mul__(scalar)

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)
