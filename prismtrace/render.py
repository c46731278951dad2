"""Camera, parallel rendering of the framebuffer, PPM output and the command line."""

from __future__ import annotations

import argparse
import math
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from itertools import repeat
from pathlib import Path
from typing import Iterable, Sequence

from prismtrace.scene import Scene, load_scene
from prismtrace.tracer import cast_ray
from prismtrace.vectors import Vector2, Vector3

FOURX_AA = (
    Vector2(0.25, 0.25),
    Vector2(-0.25, 0.25),
    Vector2(0.25, -0.25),
    Vector2(-0.25, -0.25),
)

_FOV = 1.0
_ORIGIN = Vector3(0.0, 0.0, 0.0)
_ZERO = Vector3(0.0, 0.0, 0.0)


def pixel_direction(
    x: int, y: int, width: int, height: int, offset_x: float = 0.0, offset_y: float = 0.0
) -> Vector3:
    """Unit direction of the camera ray through a point of pixel (x, y)."""
    half_view = math.tan(_FOV / 2.0)
    along_x = (2.0 * (x + 0.5 + offset_x) / width - 1.0) * half_view * (width / height)
    along_y = -(2.0 * (y + 0.5 + offset_y) / height - 1.0) * half_view
    return Vector3(along_x, along_y, -1.0).normalize()


def render_pixel(scene: Scene, x: int, y: int) -> Vector3:
    """Colour of one pixel, averaged over four samples when anti-aliasing is on."""
    width, height = scene.width, scene.height
    if scene.anti_alias == 1:
        weight = 1.0 / len(FOURX_AA)
        color = _ZERO
        for offset in FOURX_AA:
            direction = pixel_direction(x, y, width, height, offset.x, offset.y)
            color = color + cast_ray(_ORIGIN, direction, scene, 0) * weight
        return color
    return cast_ray(_ORIGIN, pixel_direction(x, y, width, height), scene, 0)


def _render_rows(scene: Scene, start: int, end: int) -> list[Vector3]:
    return [render_pixel(scene, x, y) for y in range(start, end) for x in range(scene.width)]


def _row_bands(height: int, workers: int) -> list[tuple[int, int]]:
    share = height / workers
    return [(int(j * share), int((j + 1) * share)) for j in range(workers)]


def _collect(results: Iterable[list[Vector3]], total: int) -> list[Vector3]:
    framebuffer: list[Vector3] = []
    for rows in results:
        framebuffer.extend(rows)
        if total:
            percent = int(len(framebuffer) / total * 100.0)
            print(f"\r{percent}% of the image rendered.", end="", flush=True)
    return framebuffer


def render(scene: Scene, workers: int | None = None) -> list[Vector3]:
    """Render the scene row-major into a list of width * height colours.

    Rows are split into one band per worker; more than one worker renders
    the bands in separate processes.
    """
    if workers is None:
        workers = os.cpu_count() or 1
        print(f"{workers} threads available.")
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    started = time.perf_counter()
    bands = _row_bands(scene.height, workers)
    total = scene.width * scene.height
    if workers == 1:
        framebuffer = _collect((_render_rows(scene, a, b) for a, b in bands), total)
    else:
        starts = [a for a, _ in bands]
        ends = [b for _, b in bands]
        with ProcessPoolExecutor(max_workers=workers) as pool:
            framebuffer = _collect(
                pool.map(_render_rows, repeat(scene, len(bands)), starts, ends), total
            )
    elapsed = time.perf_counter() - started
    print(f"\nRendering completed in {elapsed} seconds.")
    return framebuffer


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a >= b else b


def _pixel_bytes(color: Vector3) -> bytes:
    """Scale an over-bright colour down to its brightest channel, then to bytes."""
    peak = _fmax(color.x, _fmax(color.y, color.z))
    if peak > 1.0:
        color = color * (1.0 / peak)
    return (color * 255.0).to_bytes()


def write_ppm(
    framebuffer: Sequence[Vector3], width: int, height: int, path: str | Path = "out.ppm"
) -> None:
    """Write the first width * height colours as a binary (P6) PPM image."""
    count = width * height
    if len(framebuffer) < count:
        raise ValueError(f"framebuffer holds {len(framebuffer)} pixels, {count} needed")
    started = time.perf_counter()
    with open(path, "wb") as handle:
        handle.write(f"P6\n{width} {height}\n255\n".encode("ascii"))
        for row in range(height):
            first = row * width
            pixels = framebuffer[first : first + width]
            handle.write(b"".join(_pixel_bytes(color) for color in pixels))
            written = int(((first + width - 1) / count) * 100.0 + 1.0)
            print(f"\r{written}% of the image written to disk.", end="", flush=True)
    elapsed = time.perf_counter() - started
    print(f"\nWriting completed in {elapsed} seconds.")


def _positive(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    """Render a scene script to a PPM image."""
    parser = argparse.ArgumentParser(
        prog="prismtrace", description="Render a scene script to a PPM image."
    )
    parser.add_argument("script", nargs="?", help="scene script; asked for when omitted")
    parser.add_argument("-o", "--output", default="out.ppm", help="image file to write")
    parser.add_argument("-w", "--workers", type=_positive, default=None,
                        help="number of worker processes (default: one per CPU)")
    args = parser.parse_args(argv)

    print("Welcome to prismtrace!")
    script = args.script
    if script is None:
        print(
            "Please enter the local path to your script file (example at 'scripts/house.rt'):",
            flush=True,
        )
        script = sys.stdin.readline().strip()
    scene = load_scene(script)
    print("Starting your render.")
    framebuffer = render(scene, args.workers)
    try:
        # The header gives the script's "h" value as the first dimension.
        write_ppm(framebuffer, scene.height, scene.width, args.output)
    except OSError as err:
        print(f"Failed to write {args.output}: {err}", file=sys.stderr)
        return 1
    return 0