"""Scene description scripts: render settings, materials, lights and objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from prismtrace.model import Model, load_model
from prismtrace.vectors import Light, Material, Sphere, Vector3, Vector4

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_USIZE_MAX = 2**64 - 1


@dataclass
class Scene:
    """Everything a render needs: objects, lights and settings."""

    lights: list[Light] = field(default_factory=list)
    spheres: list[Sphere] = field(default_factory=list)
    meshes: list[Model] = field(default_factory=list)
    background_color: Vector3 = Vector3(1.0, 1.0, 1.0)
    path_depth: int = 5
    height: int = 1280
    width: int = 720
    anti_alias: int = 1


class _Tokens:
    """Whitespace-separated fields of one script line, with typed access."""

    def __init__(self, line: str, number: int) -> None:
        self._fields = line.split()
        self._number = number

    def _fail(self, message: str) -> ValueError:
        return ValueError(f"line {self._number}: {message}")

    def word(self, index: int) -> str:
        try:
            return self._fields[index]
        except IndexError:
            raise self._fail(f"missing field {index}") from None

    def _integer(self, index: int, low: int, high: int) -> int:
        text = self.word(index)
        try:
            if "_" in text:
                raise ValueError(text)
            value = int(text)
        except ValueError:
            raise self._fail(f"invalid integer {text!r}") from None
        if not low <= value <= high:
            raise self._fail(f"integer {text!r} out of range")
        return value

    def integer(self, index: int) -> int:
        return self._integer(index, _I32_MIN, _I32_MAX)

    def count(self, index: int) -> int:
        return self._integer(index, 0, _USIZE_MAX)

    def real(self, index: int) -> float:
        text = self.word(index)
        try:
            if "_" in text:
                raise ValueError(text)
            return float(text)
        except ValueError:
            raise self._fail(f"invalid number {text!r}") from None

    def vector(self, index: int) -> Vector3:
        return Vector3(self.real(index), self.real(index + 1), self.real(index + 2))

    def vector4(self, index: int) -> Vector4:
        return Vector4(*(self.real(index + offset) for offset in range(4)))

    def material(self, index: int, materials: dict[str, Material]) -> Material:
        name = self.word(index)
        try:
            return materials[name]
        except KeyError:
            raise self._fail(f"unknown material {name!r}") from None


def parse_scene(lines: Iterable[str]) -> Scene:
    """Build a scene from script lines.

    Each line is recognised by its first two characters; unrecognised lines
    are ignored. Materials must be defined before objects that use them.
    """
    scene = Scene()
    materials: dict[str, Material] = {}
    for number, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        tokens = _Tokens(line, number)
        key = line[:2]
        if key == "h ":
            scene.height = tokens.count(1)
        elif key == "w ":
            scene.width = tokens.count(1)
        elif key == "r ":
            scene.path_depth = tokens.integer(1)
        elif key == "aa":
            scene.anti_alias = tokens.integer(1)
        elif key == "bg":
            scene.background_color = tokens.vector(1)
        elif key == "mt":
            materials[tokens.word(1)] = Material(
                tokens.vector(2), tokens.vector4(5), tokens.real(9), tokens.real(10)
            )
        elif key == "l ":
            scene.lights.append(Light(tokens.vector(1), tokens.real(4)))
        elif key == "sp":
            scene.spheres.append(
                Sphere(tokens.vector(1), tokens.real(4), tokens.material(5, materials))
            )
        elif key == "ms":
            scene.meshes.append(
                load_model(tokens.word(1), tokens.vector(2), tokens.material(5, materials))
            )
    return scene


def _decoded_lines(data: bytes) -> Iterator[str]:
    """Yield UTF-8 lines, stopping at the first one that does not decode."""
    for raw in data.split(b"\n"):
        try:
            yield raw.decode("utf-8")
        except UnicodeDecodeError:
            return


def load_scene(path: str | Path) -> Scene:
    """Read a scene script; an unreadable file gives the default scene."""
    try:
        data = Path(path).read_bytes()
    except OSError:
        return Scene()
    return parse_scene(_decoded_lines(data))