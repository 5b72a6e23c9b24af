[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cn105"
version = "0.1.0"
description = "Frames, decoding and climate logic for Mitsubishi heat pumps speaking the CN105 serial protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["mitsubishi", "heatpump", "cn105", "climate", "home-automation", "protocol"]
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
    "Topic :: Home Automation",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cn105"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
