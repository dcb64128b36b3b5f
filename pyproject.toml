[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "brickgame"
version = "0.1.0"
description = "A falling-block puzzle game for the terminal, played with curses"
requires-python = ">=3.10"
dependencies = []
keywords = ["tetris", "game", "curses", "terminal", "puzzle"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
brickgame = "brickgame.tetris:main"

[tool.hatch.build.targets.wheel]
packages = ["brickgame"]

[tool.pytest.ini_options]
addopts = "-ra"
