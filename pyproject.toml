[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "protorust"
version = "0.6.1"
description = "Generate prost-style Rust type definitions from compiled Protocol Buffers descriptors."
requires-python = ">=3.10"
dependencies = [
    "protobuf",
]
keywords = [
    "protobuf",
    "protocol-buffers",
    "protoc",
    "code-generation",
    "prost",
    "rust",
    "descriptors",
]
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
    "Topic :: Software Development :: Code Generators",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["protorust"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
