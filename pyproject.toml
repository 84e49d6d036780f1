[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "modshelf"
version = "1.0.0"
description = "Terminal mod manager: browse stored game mods, apply or remove them, and manage mod presets"
requires-python = ">=3.10"
dependencies = []
keywords = ["mods", "mod-manager", "games", "terminal", "presets"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
modshelf = "modshelf.app:main"

[tool.hatch.build.targets.wheel]
packages = ["modshelf"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
