[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "calogeo"
version = "0.1.0"
description = "Geometry model and hit bookkeeping for a sampling calorimeter built from lead, iron, scintillator bars and fibre layers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "calorimeter",
    "detector geometry",
    "scintillator",
    "particle physics",
    "sqlite",
]
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
test = ["pytest"]

[project.scripts]
calogeo-make-db = "calogeo.make_db:main"

[tool.hatch.build.targets.wheel]
packages = ["calogeo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
