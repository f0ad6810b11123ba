[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sunnynes"
version = "0.1.0"
description = "NES 2A03 audio unit emulation plus front-end helpers for a small NES emulator: sample queue, startup options, window layout, immediate-mode GUI state and debug-view data."
requires-python = ">=3.10"
dependencies = []
keywords = ["nes", "emulator", "2a03", "apu", "audio", "famicom"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sunnynes"]

[tool.hatch.build.targets.sdist]
include = ["sunnynes", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
