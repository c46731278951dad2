# prismtrace

prismtrace is a small recursive ray tracer. It reads a scene script written in
plain text and traces spheres and triangle meshes loaded from OBJ files. It
writes the finished picture as a binary (P6) PPM image.

The renderer handles diffuse and specular lighting, hard shadows, reflection,
refraction through Snell's law, and optional 4x anti-aliasing.

It has no runtime dependencies beyond Python 3.10 or later.

## Installation

```
pip install .
```

To also install the test tools:

```
pip install .[test]
pytest
```

## Running

```
prismtrace [script] [-o OUTPUT] [-w WORKERS]
```

- `script`: the scene script to render. If you leave it out, the command asks
  for a path on standard input.
- `-o`, `--output`: the image file to write. The default is `out.ppm`.
- `-w`, `--workers`: the number of worker processes. It must be at least 1. The
  default is one per CPU.

Rows of the image are split into one band per worker. With more than one worker,
each band is rendered in its own process. Progress goes to standard output. If
the image cannot be written, the command reports it on standard error and exits
with status 1.

The command writes the PPM header with the script's `h` value first, where PPM
expects the width, and the `w` value second. The framebuffer itself is laid out
as `h` rows of `w` pixels. A picture with different `h` and `w` values therefore
comes out scrambled from the command. Square pictures are safe. When you use the
library, you can call `write_ppm` with `scene.width, scene.height` yourself (see
below).

## Scene scripts

A script has one directive on each line. The first two characters of a line
pick the directive. Lines that match no directive are ignored.

| Line                                          | Meaning                                        |
|-----------------------------------------------|------------------------------------------------|
| `h <n>`                                       | number of rows (default 1280)                  |
| `w <n>`                                       | pixels per row (default 720)                   |
| `r <n>`                                       | maximum recursion depth (default 5)            |
| `aa <n>`                                      | 1 turns on 4x anti-aliasing, anything else turns it off (default 1) |
| `bg <r> <g> <b>`                              | background colour (default 1 1 1)              |
| `mt <name> <r> <g> <b> <a0> <a1> <a2> <a3> <spec> <ior>` | define a material               |
| `l <x> <y> <z> <intensity>`                   | point light                                    |
| `sp <x> <y> <z> <radius> <material>`          | sphere                                         |
| `ms <file.obj> <x> <y> <z> <material>`        | OBJ mesh, offset by the given position         |

A material has a diffuse colour and four albedo weights: diffuse, specular,
reflection and refraction. It also has a specular exponent and a refractive
index. A material has to be defined before a sphere or mesh uses it.

The parser raises `ValueError` in these cases, and the message gives the line
number:

- a field is missing;
- a number does not parse;
- an integer is out of range;
- a line names an unknown material.

If the script file itself cannot be read, `load_scene` gives the default scene,
which has no objects. If a mesh file cannot be opened, the command prints a
message on standard error and the mesh is left empty.

OBJ files are read for `v` (vertex) and `f` (face) records. Faces with more than
three corners are split into a fan of triangles. Only the vertex part of
`v/vt/vn` references is used. All other records are ignored.

Example:

```
h 256
w 256
aa 0
bg 0.2 0.7 0.8
mt ivory 0.4 0.4 0.3 0.6 0.3 0.1 0.0 50 1.0
mt glass 0.6 0.7 0.8 0.0 0.5 0.1 0.8 125 1.5
l -20 20 20 1.5
sp -3 0 -16 2 ivory
sp -1 -1.5 -12 2 glass
```

The camera sits at the origin and looks down the negative z axis. Its field of
view is 1 radian. Objects farther than 1000 units along a ray are not seen.
Before a colour is written, any channel above 1 makes the whole colour scale
down so that its brightest channel is 1.

## Using it as a library

```python
from prismtrace.scene import load_scene
from prismtrace.render import render, write_ppm

scene = load_scene("scene.rt")
framebuffer = render(scene, workers=4)
write_ppm(framebuffer, scene.width, scene.height, "out.ppm")
```

The modules are:

- `prismtrace.vectors`: `Vector2`, `Vector3`, `Vector3i`, `Vector4`, `Light`,
  `Material` and `Sphere`, as frozen dataclasses. `Vector3` supports `+`, `-`,
  scalar `*`, `dot`, `cross`, `magnitude`, `normalize` and `to_bytes`.
- `prismtrace.model`: `Model`, `parse_obj(lines)` and
  `load_model(filename, transform, material)`.
- `prismtrace.scene`: `Scene`, `parse_scene(lines)` and `load_scene(path)`.
- `prismtrace.tracer`: `reflect`, `refract`, `sphere_intersect`,
  `triangle_intersect`, `scene_intersect` and `cast_ray`.
- `prismtrace.render`: `pixel_direction`, `render_pixel`, `render`, `write_ppm`
  and `main`.

## What it does not do

prismtrace writes PPM files only. It has no preview window, and it does not
support other image formats, textures or camera placement in the script.