[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smartfloor"
version = "0.1.0"
description = "Simulated smart-building floor: energy-aware setpoint control, battery management and CoAP-style resources"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "home automation",
    "building automation",
    "coap",
    "energy",
    "hvac",
    "simulation",
]
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
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["smartfloor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
