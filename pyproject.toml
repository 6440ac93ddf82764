[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rtltuners"
version = "0.1.0"
description = "Register-level drivers for RTL2832 dongle tuners (E4000, FC0012), EEPROM image helpers and a dongle catalog"
requires-python = ">=3.10"
dependencies = []
keywords = ["rtl-sdr", "sdr", "e4000", "fc0012", "tuner", "eeprom", "radio"]
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
    "Topic :: Communications :: Ham Radio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rtltuners"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
