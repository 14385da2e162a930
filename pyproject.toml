[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fidlver"
version = "0.1.0"
description = "Platform versions, version ranges and availability tracking for FIDL-style interface libraries"
requires-python = ">=3.10"
dependencies = []
keywords = ["fidl", "versioning", "availability", "compiler", "idl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fidlver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
