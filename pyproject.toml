[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tomlc"
version = "1.0.0"
description = "A small TOML parser with typed accessors and a TOML-to-JSON converter"
requires-python = ">=3.10"
dependencies = []
keywords = ["toml", "parser", "configuration", "json"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
toml2json = "tomlc.toml2json:main"

[tool.hatch.build.targets.wheel]
packages = ["tomlc"]

[tool.pytest.ini_options]
addopts = "-ra"
