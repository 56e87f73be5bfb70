[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smashreader"
version = "0.1.0"
description = "Reader and analysis framework for SMASH binary particle output files"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["smash", "heavy-ion", "particles", "binary", "histogram", "rapidity"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
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
test = [
    "pytest",
]

[project.scripts]
smashreader = "smashreader.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["smashreader"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
