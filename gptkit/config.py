"""Client configuration and its presets."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

OPENAI_API_URL_V1 = "https://api.openai.com/v1"
ANTHROPIC_API_URL_V1 = "https://api.anthropic.com/v1"
DEFAULT_EMPTY_MESSAGES_LIMIT = 300

AZURE_API_PREFIX = "openai"
AZURE_DEPLOYMENTS_PREFIX = "deployments"
AZURE_AUTH_HEADER = "api-key"
AZURE_DEFAULT_API_VERSION = "2023-05-15"

ANTHROPIC_API_VERSION = "2023-06-01"

DEFAULT_ASSISTANT_VERSION = "v2"

_AZURE_MODEL_STRIP = re.compile(r"[.:]")


class APIType(str, Enum):
    """Which flavour of the API the client talks to."""

    OPENAI = "OPEN_AI"
    AZURE = "AZURE"
    AZURE_AD = "AZURE_AD"
    CLOUDFLARE_AZURE = "CLOUDFLARE_AZURE"
    ANTHROPIC = "ANTHROPIC"


@dataclass(repr=False)
class ClientConfig:
    """Settings for a client; api_version is required for Azure and Anthropic."""

    auth_token: str = ""
    base_url: str = OPENAI_API_URL_V1
    org_id: str = ""
    api_type: APIType = APIType.OPENAI
    api_version: str = ""
    assistant_version: str = DEFAULT_ASSISTANT_VERSION
    azure_model_mapper: Callable[[str], str] | None = None
    http_client: Any = None
    empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT

    def __str__(self) -> str:
        return "<OpenAI API ClientConfig>"

    __repr__ = __str__

    def azure_deployment_by_model(self, model: str) -> str:
        """Return the Azure deployment name for a model."""
        if self.azure_model_mapper is not None:
            return self.azure_model_mapper(model)
        return model


def _azure_deployment_name(model: str) -> str:
    return _AZURE_MODEL_STRIP.sub("", model)


def default_config(auth_token: str) -> ClientConfig:
    """Configuration for the public API."""
    return ClientConfig(auth_token=auth_token)


def default_azure_config(api_key: str, base_url: str) -> ClientConfig:
    """Configuration for an Azure deployment."""
    return ClientConfig(
        auth_token=api_key,
        base_url=base_url,
        api_type=APIType.AZURE,
        api_version=AZURE_DEFAULT_API_VERSION,
        assistant_version="",
        azure_model_mapper=_azure_deployment_name,
    )


def default_anthropic_config(api_key: str, base_url: str = "") -> ClientConfig:
    """Configuration for the Anthropic compatibility endpoint."""
    return ClientConfig(
        auth_token=api_key,
        base_url=base_url or ANTHROPIC_API_URL_V1,
        api_type=APIType.ANTHROPIC,
        api_version=ANTHROPIC_API_VERSION,
        assistant_version="",
    )