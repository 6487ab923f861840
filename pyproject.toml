[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentpg"
version = "0.1.0"
description = "Building blocks for tool-using language-model agents: message types, storage records, stream accumulation, tools, input validation, API conversion and logging hooks."
requires-python = ">=3.10"
dependencies = []
keywords = ["agents", "llm", "tools", "streaming", "json-schema", "logging"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["agentpg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
