[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "eaglectl"
version = "1.0.8"
description = "Controller logic for a three-axis encoder-driven linear actuator rig with a CRC-checked serial protocol"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "actuator",
    "encoder",
    "pid",
    "serial-protocol",
    "crc8",
    "motion-control",
    "simulation",
]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["eaglectl*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
