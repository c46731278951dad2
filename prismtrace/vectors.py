"""Vector types and the scene primitives built from them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


def _to_u8(value: float) -> int:
    """Convert a float to a byte: truncate toward zero and saturate, NaN becomes 0."""
    if math.isnan(value):
        return 0
    return int(min(max(value, 0.0), 255.0))


@dataclass(frozen=True)
class Vector2:
    """A pair of floats."""

    x: float
    y: float


@dataclass(frozen=True)
class Vector3:
    """A three-component float vector."""

    x: float
    y: float
    z: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def dot(self, other: Vector3) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Cross product."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vector3:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.magnitude()
        if length == 0.0:
            return Vector3(0.0, 0.0, 0.0)
        return Vector3(self.x / length, self.y / length, self.z / length)

    def to_bytes(self) -> bytes:
        """The three components as saturated, truncated bytes."""
        return bytes(_to_u8(component) for component in self)

    def __add__(self, other: object) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: object) -> Vector3:
        if isinstance(scalar, bool) or not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vector3:
        return self * -1.0


@dataclass(frozen=True)
class Vector3i:
    """A three-component integer vector, used for triangle indices."""

    x: int
    y: int
    z: int


@dataclass(frozen=True)
class Vector4:
    """A four-component float vector."""

    x: float
    y: float
    z: float
    a: float


@dataclass(frozen=True)
class Light:
    """A point light."""

    transform: Vector3
    intensity: float


@dataclass(frozen=True)
class Material:
    """Surface properties: colour, albedo weights, shininess and refraction."""

    diffuse_color: Vector3
    albedo: Vector4
    specular_exponent: float
    refractive_index: float


@dataclass(frozen=True)
class Sphere:
    """A sphere with a centre, a radius and a material."""

    transform: Vector3
    radius: float
    material: Material