"""Ray-object intersection and recursive shading with reflection, refraction and shadows."""

from __future__ import annotations

import math
from typing import Sequence

from prismtrace.model import Model
from prismtrace.scene import Scene
from prismtrace.vectors import Material, Sphere, Vector3

_EPSILON = 0.0001
_SURFACE_OFFSET = 0.001
_MAX_DISTANCE = 1000.0
_ZERO = Vector3(0.0, 0.0, 0.0)
_WHITE = Vector3(1.0, 1.0, 1.0)

Hit = tuple[Vector3, Vector3, Material]


def _fmax(a: float, b: float) -> float:
    """Maximum that ignores a NaN operand."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a >= b else b


def _fmin(a: float, b: float) -> float:
    """Minimum that ignores a NaN operand."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a <= b else b


def _divide(numerator: float, denominator: float) -> float:
    """IEEE division: a zero denominator gives an infinity or NaN instead of raising."""
    if denominator != 0.0:
        return numerator / denominator
    if numerator == 0.0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _powf(base: float, exponent: float) -> float:
    """Power with IEEE results for a zero base and for overflow."""
    if base == 0.0 and exponent < 0.0:
        return math.inf
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf


def refract(incident: Vector3, normal: Vector3, refractive_index: float) -> Vector3:
    """Refracted direction by Snell's law; total internal reflection gives the zero vector."""
    cosi = -_fmax(-1.0, _fmin(1.0, incident.dot(normal)))
    etai, etat, n = 1.0, refractive_index, normal
    if cosi < 0.0:
        cosi = -cosi
        etai, etat = etat, etai
        n = normal * -1.0
    eta = _divide(etai, etat)
    k = 1.0 - eta * eta * (1.0 - cosi * cosi)
    if k < 0.0:
        return _ZERO
    return incident * eta + n * (eta * cosi - math.sqrt(k))


def reflect(incident: Vector3, normal: Vector3) -> Vector3:
    """Mirror direction of ``incident`` about ``normal``."""
    return incident - normal * 2.0 * incident.dot(normal)


def sphere_intersect(sphere: Sphere, origin: Vector3, direction: Vector3) -> float | None:
    """Distance along the ray to the sphere, or None if it is missed."""
    offset = sphere.transform - origin
    projection = offset.dot(direction)
    distance_sq = offset.dot(offset) - projection * projection
    radius_sq = sphere.radius * sphere.radius
    if distance_sq > radius_sq:
        return None
    half_chord = math.sqrt(radius_sq - distance_sq)
    distance = projection - half_chord
    if distance < 0.0:
        distance = projection + half_chord
    if not distance < 0.0:
        return distance
    return None


def triangle_intersect(
    origin: Vector3,
    direction: Vector3,
    v0: Vector3,
    v1: Vector3,
    v2: Vector3,
    transform: Vector3,
) -> tuple[float, Vector3] | None:
    """Distance and unit face normal where the ray meets the offset triangle, or None."""
    v0 = v0 + transform
    v1 = v1 + transform
    v2 = v2 + transform
    edge1 = v1 - v0
    edge2 = v2 - v0
    h = direction.cross(edge2)
    a = edge1.dot(h)
    if abs(a) < _EPSILON:
        return None
    f = 1.0 / a
    s = origin - v0
    u = f * s.dot(h)
    if not 0.0 <= u <= 1.0:
        return None
    q = s.cross(edge1)
    v = f * direction.dot(q)
    if v < 0.0 or u + v > 1.0:
        return None
    t = f * edge2.dot(q)
    if t > _EPSILON:
        return t, edge1.cross(edge2).normalize()
    return None


def _vertex(mesh: Model, index: int) -> Vector3:
    if index < 0:
        raise IndexError(f"vertex index {index} out of range")
    return mesh.verts[index]


def scene_intersect(
    origin: Vector3,
    direction: Vector3,
    spheres: Sequence[Sphere],
    meshes: Sequence[Model],
) -> Hit | None:
    """Nearest hit point, surface normal and material within range, or None."""
    closest = math.inf
    hit: Hit | None = None
    for sphere in spheres:
        distance = sphere_intersect(sphere, origin, direction)
        if distance is not None and distance < closest:
            closest = distance
            point = origin + direction * distance
            hit = (point, (point - sphere.transform).normalize(), sphere.material)
    for mesh in meshes:
        for face in mesh.faces:
            found = triangle_intersect(
                origin,
                direction,
                _vertex(mesh, face.x),
                _vertex(mesh, face.y),
                _vertex(mesh, face.z),
                mesh.transform,
            )
            if found is not None and found[0] < closest:
                closest, normal = found
                hit = (origin + direction * closest, normal, mesh.material)
    if closest < _MAX_DISTANCE:
        return hit
    return None


def _offset(point: Vector3, normal: Vector3, direction: Vector3) -> Vector3:
    """Nudge a ray origin off the surface, to the side the ray leaves towards."""
    if direction.dot(normal) < 0.0:
        return point - normal * _SURFACE_OFFSET
    return point + normal * _SURFACE_OFFSET


def cast_ray(origin: Vector3, direction: Vector3, scene: Scene, depth: int = 0) -> Vector3:
    """Colour seen along a ray, following reflections and refractions up to the path depth."""
    if depth > scene.path_depth:
        return scene.background_color
    hit = scene_intersect(origin, direction, scene.spheres, scene.meshes)
    if hit is None:
        return scene.background_color
    point, normal, material = hit

    reflect_color = _ZERO
    refract_color = _ZERO
    if scene.lights:
        reflect_dir = reflect(direction, normal).normalize()
        refract_dir = refract(direction, normal, material.refractive_index).normalize()
        reflect_color = cast_ray(
            _offset(point, normal, reflect_dir), reflect_dir, scene, depth + 1
        )
        refract_color = cast_ray(
            _offset(point, normal, refract_dir), refract_dir, scene, depth + 1
        )

    diffuse = 0.0
    specular = 0.0
    for light in scene.lights:
        to_light = light.transform - point
        light_dir = to_light.normalize()
        light_distance = to_light.magnitude()
        shadow_origin = _offset(point, normal, light_dir)
        blocker = scene_intersect(shadow_origin, light_dir, scene.spheres, scene.meshes)
        if blocker is not None and (blocker[0] - shadow_origin).magnitude() < light_distance:
            continue
        diffuse += light.intensity * _fmax(light_dir.dot(normal), 0.0)
        highlight = _fmax(0.0, (-reflect(-light_dir, normal)).dot(direction))
        specular += _powf(highlight, material.specular_exponent) * light.intensity

    albedo = material.albedo
    return (
        material.diffuse_color * diffuse * albedo.x
        + _WHITE * specular * albedo.y
        + reflect_color * albedo.z
        + refract_color * albedo.a
    )