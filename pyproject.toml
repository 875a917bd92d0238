[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nachos"
version = "0.1.0"
description = "A small teaching kernel: cooperative threads, a FIFO scheduler, semaphores, locks and condition variables"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-systems",
    "kernel",
    "threads",
    "scheduler",
    "semaphore",
    "condition-variable",
    "teaching",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System Kernels",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nachos = "nachos.main:main"

[tool.hatch.build.targets.wheel]
packages = ["nachos"]

[tool.hatch.build.targets.sdist]
include = ["nachos", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
