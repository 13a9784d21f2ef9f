[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "resilience"
version = "0.1.0"
description = "Checkpoint building blocks: member registration, array view holders and copy hooks, timing traces, JSON output and checkpoint directory helpers"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["checkpointing", "resilience", "tracing", "serialization", "json"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["resilience"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
