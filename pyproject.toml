[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pmtsim"
version = "0.1.0"
description = "Monte Carlo simulation of photomultiplier hits and digitised PMT waveforms"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = [
    "photomultiplier",
    "pmt",
    "simulation",
    "waveform",
    "digitizer",
    "monte-carlo",
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
test = [
    "pytest",
]

[project.scripts]
pmtsim = "pmtsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pmtsim"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
