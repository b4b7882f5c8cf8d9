[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lptics"
version = "0.1.0"
description = "Cosmological initial-condition building blocks: configuration files, linear growth, transfer function fits and dealiased spectral convolutions"
requires-python = ">=3.10"
keywords = [
    "cosmology",
    "initial conditions",
    "transfer function",
    "growth factor",
    "Eisenstein-Hu",
    "convolution",
    "dealiasing",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Astronomy",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lptics"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
