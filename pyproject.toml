[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gptkit"
version = "0.1.0"
description = "Request and response models, error types and request building for OpenAI-compatible HTTP APIs"
requires-python = ">=3.10"
dependencies = []
keywords = ["openai", "api", "completions", "embeddings", "images", "fine-tuning", "multipart"]
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
packages = ["gptkit"]

[tool.pytest.ini_options]
addopts = "-ra"
