[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "envtoggle"
version = "0.1.0"
description = "A terminal interface for switching variables on and off in .env files"
requires-python = ">=3.10"
dependencies = []
keywords = ["dotenv", "env", "environment", "tui", "curses", "configuration"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
envtoggle = "envtoggle.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["envtoggle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
