[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mbitsim"
version = "0.1.0"
description = "Simulated micro:bit runtime pieces in plain Python: clock and timers, music, tunes, radio, board functions and reciter rule tables."
requires-python = ">=3.10"
dependencies = []
keywords = ["microbit", "simulator", "embedded", "music", "radio", "timers"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
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

[tool.hatch.build.targets.wheel]
packages = ["mbitsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
