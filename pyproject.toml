[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mavplan"
version = "0.1.0"
description = "Planning utilities for micro aerial vehicles: yaw policies, path resampling, particle-based intermediate goals and planning panel state."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["mav", "drone", "path planning", "trajectory", "esdf", "robotics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mavplan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
