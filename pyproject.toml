[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dbuswire"
version = "1.0.0"
description = "Building blocks for the D-Bus wire protocol: SASL authentication, socket transport, signatures, match rules and introspection XML"
requires-python = ">=3.10"
dependencies = []
keywords = ["dbus", "d-bus", "ipc", "sasl", "introspection", "unix-socket"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dbuswire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
