"""Triangle meshes loaded from Wavefront OBJ files."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable

from prismtrace.vectors import Material, Vector3, Vector3i

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class Model:
    """A triangle mesh placed in the scene with an offset and a material."""

    transform: Vector3
    material: Material
    verts: tuple[Vector3, ...] = ()
    faces: tuple[Vector3i, ...] = ()


def _parse_float(text: str, line_number: int) -> float:
    try:
        if "_" in text:
            raise ValueError(text)
        return float(text)
    except ValueError:
        raise ValueError(f"line {line_number}: invalid number {text!r}") from None


def _parse_index(text: str, line_number: int) -> int:
    try:
        if "_" in text:
            raise ValueError(text)
        value = int(text)
    except ValueError:
        raise ValueError(f"line {line_number}: invalid face index {text!r}") from None
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"line {line_number}: face index {text!r} out of range")
    return value


def parse_obj(lines: Iterable[str]) -> tuple[tuple[Vector3, ...], tuple[Vector3i, ...]]:
    """Read vertices and fan-triangulated faces from OBJ text lines.

    Face indices are converted to zero-based; only the vertex part of
    ``v/vt/vn`` references is used. Other records are ignored.
    """
    verts: list[Vector3] = []
    faces: list[Vector3i] = []
    for number, line in enumerate(lines, 1):
        parts = line.split()
        if not parts:
            continue
        kind = parts[0]
        if kind == "v":
            if len(parts) < 4:
                raise ValueError(f"line {number}: vertex needs three coordinates")
            x, y, z = (_parse_float(part, number) for part in parts[1:4])
            verts.append(Vector3(x, y, z))
        elif kind == "f":
            indices = [
                _parse_index(part.split("/", 1)[0], number) - 1 for part in parts[1:]
            ]
            faces.extend(
                Vector3i(indices[0], second, third)
                for second, third in zip(indices[1:], indices[2:])
            )
    return tuple(verts), tuple(faces)


def load_model(filename: str, transform: Vector3, material: Material) -> Model:
    """Load an OBJ file; a file that cannot be opened gives an empty mesh."""
    try:
        handle = open(filename, encoding="utf-8")
    except OSError as err:
        print(f"Failed to open {filename}: {err}", file=sys.stderr)
        return Model(transform, material)
    with handle:
        verts, faces = parse_obj(handle)
    return Model(transform, material, verts, faces)