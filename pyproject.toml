[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "navplan"
version = "0.1.0"
description = "Grid navigation-function path planner with Dijkstra and A* propagation, gradient path extraction and velocity sampling helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["path planning", "navigation function", "dijkstra", "a-star", "costmap", "robotics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["navplan"]

[tool.pytest.ini_options]
addopts = "-ra"
