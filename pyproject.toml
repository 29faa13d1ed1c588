[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tapesort"
version = "0.1.0"
description = "External merge sort of 32-bit integers stored on simulated file tapes"
requires-python = ">=3.10"
dependencies = []
keywords = ["tape", "external sort", "merge sort", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
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
tapesort = "tapesort.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tapesort"]

[tool.pytest.ini_options]
addopts = "-ra"
