[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sphys"
version = "0.1.0"
description = "Rigid bodies, forces, constraint islands solved by projected Gauss-Seidel, and collision helpers"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["physics", "rigid body", "constraints", "gauss-seidel", "collision"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sphys"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
