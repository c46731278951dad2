[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "prismtrace"
version = "0.1.0"
description = "A small recursive ray tracer driven by plain-text scene scripts, writing binary PPM images."
requires-python = ">=3.10"
dependencies = []
keywords = ["ray tracing", "rendering", "ppm", "3d", "obj"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
prismtrace = "prismtrace.render:main"

[tool.hatch.build.targets.wheel]
packages = ["prismtrace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
