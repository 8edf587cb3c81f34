[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cassebrique"
version = "0.1.0"
description = "A brick-breaker arcade game with a software renderer and a small audio mixer"
requires-python = ">=3.10"
keywords = ["game", "breakout", "brick-breaker", "arcade", "software-rendering", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Arcade",
]
dependencies = [
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cassebrique = "cassebrique.app:main"

[tool.hatch.build.targets.wheel]
packages = ["cassebrique"]

[tool.pytest.ini_options]
addopts = "-ra"
