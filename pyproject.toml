[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ponghub"
version = "0.1.0"
description = "Check HTTP services, keep a rolling JSON status log and render an HTML status page from it."
requires-python = ">=3.10"
keywords = ["monitoring", "uptime", "status-page", "health-check", "http"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "pyyaml>=6.0",
    "requests>=2.28",
    "jinja2>=3.1",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
ponghub = "ponghub.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ponghub"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
