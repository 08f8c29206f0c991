[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "millsim"
version = "0.1.0"
description = "Three-axis milling simulation: G-code I/O, height-map cutting, tool paths from Bezier and B-spline patches"
requires-python = ">=3.10"
keywords = ["cnc", "milling", "gcode", "heightmap", "toolpath", "bezier", "b-spline"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["millsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
