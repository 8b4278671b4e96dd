[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cfping"
version = "1.0.0"
description = "Measure TCP connect latency to every address in a set of CIDR ranges and keep the fastest"
requires-python = ">=3.10"
dependencies = []
keywords = ["ping", "tcp", "latency", "cidr", "cdn", "ipv4", "ipv6"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
cfping = "cfping.app:main"

[tool.hatch.build.targets.wheel]
packages = ["cfping"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
