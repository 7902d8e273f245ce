[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cadetpinball"
version = "0.1.0"
description = "Engine pieces of a classic 3D pinball table: geometry, projection, timers, bitmaps, depth maps, rendering, scores, options, high scores and MIDS-to-MIDI conversion."
requires-python = ">=3.10"
keywords = ["pinball", "game", "engine", "rendering", "midi", "collision"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cadetpinball"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
