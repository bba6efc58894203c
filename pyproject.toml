[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toolkit-utils"
version = "0.1.0"
description = "Everyday helpers: bit writing, byte iteration, caches, closers, events, archives, POSIX shared memory and HTTP sending."
requires-python = ">=3.10"
keywords = [
    "utilities",
    "bits",
    "cache",
    "events",
    "zip",
    "shared-memory",
    "http",
    "wsgi",
    "middleware",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["toolkit_utils"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
