[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sphwater"
version = "0.1.0"
description = "2D smoothed-particle hydrodynamics water simulation with a falling rock, a floating boat and surface waves"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["sph", "fluid", "simulation", "particles", "physics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sphwater = "sphwater.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sphwater"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
