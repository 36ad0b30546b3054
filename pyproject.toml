[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "a113"
version = "1.0.3"
description = "Building blocks for device and network tooling: status codes, address conversion, byte ports, TCP sockets, serial lines, dispensers, caches, timers and a token-routing net executor."
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["serial", "sockets", "ipv4", "bluetooth", "petri-net", "cache", "double-buffer", "dispenser"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["a113"]

[tool.pytest.ini_options]
addopts = "-ra"
