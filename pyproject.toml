[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "authgate"
version = "0.1.0"
description = "Authorization checks that route HTTP requests through pluggable filter chains on a worker pool"
requires-python = ">=3.10"
dependencies = []
keywords = ["authorization", "authentication", "filter-chain", "ext-authz", "session"]
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
    "Topic :: Internet :: WWW/HTTP :: Session",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["authgate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
