[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mediaxl"
version = "0.7.1"
description = "Timing, edit rates, flow headers, grain headers, wait/wake and shared-memory segments for media flows exchanged between processes"
requires-python = ">=3.10"
dependencies = []
keywords = ["media", "video", "audio", "flow", "shared-memory", "grain", "timing", "tai", "ring-buffer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mediaxl"]

[tool.hatch.build.targets.sdist]
include = ["mediaxl", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
files = ["mediaxl"]
