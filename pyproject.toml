[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "claudemerge"
version = "0.1.0"
description = "Merge TOML, YAML and Markdown guideline files into a single prioritised CLAUDE.md document"
requires-python = ">=3.11"
dependencies = [
    "pyyaml",
]
keywords = ["markdown", "merge", "configuration", "toml", "yaml", "templates"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Markup :: Markdown",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
claude-merge = "claudemerge.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["claudemerge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
