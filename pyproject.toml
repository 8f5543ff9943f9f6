[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tofikit"
version = "0.1.0"
description = "Launcher building blocks: CSS-like theming, fuzzy matching, run history, desktop entries and PATH scanning"
requires-python = ">=3.10"
dependencies = []
keywords = ["launcher", "dmenu", "fuzzy", "desktop-entry", "history", "theme"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tofikit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
