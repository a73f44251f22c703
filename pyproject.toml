[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "forcetool"
version = "0.1.0"
description = "Building blocks for Salesforce bulk jobs, streaming, record display, Apex test reports and DX logins"
requires-python = ">=3.10"
dependencies = []
keywords = ["salesforce", "bulk-api", "bayeux", "cometd", "apex", "junit", "sfdx"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["forcetool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
