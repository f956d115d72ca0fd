[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zaplog"
version = "0.1.0"
description = "Building blocks for structured logging: sinks opened by URL, buffered write syncers, clocks, stack traces and test helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "structured-logging", "sink", "write-syncer", "stacktrace"]
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
    "Topic :: System :: Logging",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
zaplog-readme = "zaplog.readme:main"

[tool.hatch.build.targets.wheel]
packages = ["zaplog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
