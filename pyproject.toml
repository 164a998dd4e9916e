[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "loggingdrain"
version = "0.1.0"
description = "Online log template mining with the Drain algorithm, with regex masking and Redis persistence"
requires-python = ">=3.10"
keywords = ["logs", "log-parsing", "drain", "template-mining", "clustering", "log-analysis"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Log Analysis",
    "Topic :: System :: Logging",
]
dependencies = [
    "redis>=4.2",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
loggingdrain = "loggingdrain.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["loggingdrain"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
