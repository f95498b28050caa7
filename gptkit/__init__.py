"""Configuration, request and response models, errors and request building for OpenAI-compatible HTTP APIs."""

__version__ = "0.1.0"