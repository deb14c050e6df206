[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dockcompose"
version = "0.1.0"
description = "Building blocks for a container-compose command line: terminal progress rendering, project listing, container summaries, pull and push event handling, and an end-to-end test harness."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "containers",
    "compose",
    "progress",
    "terminal",
    "orchestration",
    "e2e",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dockcompose"]

[tool.hatch.build.targets.sdist]
include = ["dockcompose", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
