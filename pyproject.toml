[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rmtoolkit"
version = "0.1.0"
description = "Signal filters, orientation helpers, DBus remote decoding and referee protocol tools for competition robots"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pyserial",
]
keywords = [
    "robotics",
    "filters",
    "quaternion",
    "dbus",
    "remote-control",
    "referee",
    "crc",
    "serial",
]
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
    "Topic :: Scientific/Engineering",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
rm-dbus = "rmtoolkit.dbus:main"

[tool.hatch.build.targets.wheel]
packages = ["rmtoolkit"]

[tool.hatch.build.targets.sdist]
include = [
    "rmtoolkit",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
