[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "learngrid"
version = "0.1.0"
description = "Typed, byte-packed data grids for machine learning: attributes, dense instances, views, sorting and CSV/ARFF loading."
requires-python = ">=3.10"
dependencies = []
keywords = ["machine learning", "dataset", "csv", "arff", "instances", "attributes"]
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
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["learngrid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
