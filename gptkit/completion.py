"""Text completion requests, responses and model support checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from gptkit.errors import (
    CompletionPromptTypeError,
    CompletionStreamNotSupportedError,
    CompletionUnsupportedModelError,
)
from gptkit.request_builder import ApiCall

O1_MINI = "o1-mini"
O1_MINI_20240912 = "o1-mini-2024-09-12"
O1_PREVIEW = "o1-preview"
O1_PREVIEW_20240912 = "o1-preview-2024-09-12"
O1 = "o1"
O1_20241217 = "o1-2024-12-17"
O3 = "o3"
O3_20250416 = "o3-2025-04-16"
O3_MINI = "o3-mini"
O3_MINI_20250131 = "o3-mini-2025-01-31"
O4_MINI = "o4-mini"
O4_MINI_20250416 = "o4-mini-2025-04-16"
GPT4_32K_0613 = "gpt-4-32k-0613"
GPT4_32K_0314 = "gpt-4-32k-0314"
GPT4_32K = "gpt-4-32k"
GPT4_0613 = "gpt-4-0613"
GPT4_0314 = "gpt-4-0314"
GPT4O = "gpt-4o"
GPT4O_20240513 = "gpt-4o-2024-05-13"
GPT4O_20240806 = "gpt-4o-2024-08-06"
GPT4O_20241120 = "gpt-4o-2024-11-20"
GPT4O_LATEST = "chatgpt-4o-latest"
GPT4O_MINI = "gpt-4o-mini"
GPT4O_MINI_20240718 = "gpt-4o-mini-2024-07-18"
GPT4_TURBO = "gpt-4-turbo"
GPT4_TURBO_20240409 = "gpt-4-turbo-2024-04-09"
GPT4_TURBO_0125 = "gpt-4-0125-preview"
GPT4_TURBO_1106 = "gpt-4-1106-preview"
GPT4_TURBO_PREVIEW = "gpt-4-turbo-preview"
GPT4_VISION_PREVIEW = "gpt-4-vision-preview"
GPT4 = "gpt-4"
GPT4_1 = "gpt-4.1"
GPT4_1_20250414 = "gpt-4.1-2025-04-14"
GPT4_1_MINI = "gpt-4.1-mini"
GPT4_1_MINI_20250414 = "gpt-4.1-mini-2025-04-14"
GPT4_1_NANO = "gpt-4.1-nano"
GPT4_1_NANO_20250414 = "gpt-4.1-nano-2025-04-14"
GPT4_5_PREVIEW = "gpt-4.5-preview"
GPT4_5_PREVIEW_20250227 = "gpt-4.5-preview-2025-02-27"
GPT5 = "gpt-5"
GPT5_MINI = "gpt-5-mini"
GPT5_NANO = "gpt-5-nano"
GPT5_CHAT_LATEST = "gpt-5-chat-latest"
GPT3_5_TURBO_0125 = "gpt-3.5-turbo-0125"
GPT3_5_TURBO_1106 = "gpt-3.5-turbo-1106"
GPT3_5_TURBO_0613 = "gpt-3.5-turbo-0613"
GPT3_5_TURBO_0301 = "gpt-3.5-turbo-0301"
GPT3_5_TURBO_16K = "gpt-3.5-turbo-16k"
GPT3_5_TURBO_16K_0613 = "gpt-3.5-turbo-16k-0613"
GPT3_5_TURBO = "gpt-3.5-turbo"
GPT3_5_TURBO_INSTRUCT = "gpt-3.5-turbo-instruct"
# Shut down; use gpt-3.5-turbo-instruct instead.
GPT3_TEXT_DAVINCI_003 = "text-davinci-003"
GPT3_TEXT_DAVINCI_002 = "text-davinci-002"
GPT3_TEXT_CURIE_001 = "text-curie-001"
GPT3_TEXT_BABBAGE_001 = "text-babbage-001"
GPT3_TEXT_ADA_001 = "text-ada-001"
GPT3_TEXT_DAVINCI_001 = "text-davinci-001"
GPT3_DAVINCI_INSTRUCT_BETA = "davinci-instruct-beta"
GPT3_CURIE_INSTRUCT_BETA = "curie-instruct-beta"
# Shut down; use davinci-002 / babbage-002 instead.
GPT3_DAVINCI = "davinci"
GPT3_DAVINCI_002 = "davinci-002"
GPT3_CURIE = "curie"
GPT3_CURIE_002 = "curie-002"
GPT3_ADA = "ada"
GPT3_ADA_002 = "ada-002"
GPT3_BABBAGE = "babbage"
GPT3_BABBAGE_002 = "babbage-002"

CODEX_CODE_DAVINCI_002 = "code-davinci-002"
CODEX_CODE_CUSHMAN_001 = "code-cushman-001"
CODEX_CODE_DAVINCI_001 = "code-davinci-001"

COMPLETIONS_SUFFIX = "/completions"
CHAT_COMPLETIONS_SUFFIX = "/chat/completions"

_DISABLED_MODELS_FOR_ENDPOINTS: dict[str, frozenset[str]] = {
    COMPLETIONS_SUFFIX: frozenset(
        {
            O1_MINI,
            O1_MINI_20240912,
            O1_PREVIEW,
            O1_PREVIEW_20240912,
            O3_MINI,
            O3_MINI_20250131,
            O4_MINI,
            O4_MINI_20250416,
            O3,
            O3_20250416,
            GPT3_5_TURBO,
            GPT3_5_TURBO_0301,
            GPT3_5_TURBO_0613,
            GPT3_5_TURBO_1106,
            GPT3_5_TURBO_0125,
            GPT3_5_TURBO_16K,
            GPT3_5_TURBO_16K_0613,
            GPT4,
            GPT4_5_PREVIEW,
            GPT4_5_PREVIEW_20250227,
            GPT4O,
            GPT4O_20240513,
            GPT4O_20240806,
            GPT4O_20241120,
            GPT4O_LATEST,
            GPT4O_MINI,
            GPT4O_MINI_20240718,
            GPT4_TURBO_PREVIEW,
            GPT4_VISION_PREVIEW,
            GPT4_TURBO_1106,
            GPT4_TURBO_0125,
            GPT4_TURBO,
            GPT4_TURBO_20240409,
            GPT4_0314,
            GPT4_0613,
            GPT4_32K,
            GPT4_32K_0314,
            GPT4_32K_0613,
            O1,
            GPT4_1,
            GPT4_1_20250414,
            GPT4_1_MINI,
            GPT4_1_MINI_20250414,
            GPT4_1_NANO,
            GPT4_1_NANO_20250414,
            GPT5,
            GPT5_MINI,
            GPT5_NANO,
            GPT5_CHAT_LATEST,
        }
    ),
    CHAT_COMPLETIONS_SUFFIX: frozenset(
        {
            CODEX_CODE_DAVINCI_002,
            CODEX_CODE_CUSHMAN_001,
            CODEX_CODE_DAVINCI_001,
            GPT3_TEXT_DAVINCI_003,
            GPT3_TEXT_DAVINCI_002,
            GPT3_TEXT_CURIE_001,
            GPT3_TEXT_BABBAGE_001,
            GPT3_TEXT_ADA_001,
            GPT3_TEXT_DAVINCI_001,
            GPT3_DAVINCI_INSTRUCT_BETA,
            GPT3_DAVINCI,
            GPT3_CURIE_INSTRUCT_BETA,
            GPT3_CURIE,
            GPT3_ADA,
            GPT3_BABBAGE,
        }
    ),
}


def endpoint_supports_model(endpoint: str, model: str) -> bool:
    """Whether the model may be used with the endpoint."""
    return model not in _DISABLED_MODELS_FOR_ENDPOINTS.get(endpoint, frozenset())


def is_supported_prompt(prompt: Any) -> bool:
    """Whether the prompt is a string or a list of strings."""
    if isinstance(prompt, str):
        return True
    if isinstance(prompt, (list, tuple)):
        return all(isinstance(item, str) for item in prompt)
    return False


@dataclass
class CompletionRequest:
    """Parameters of a text completion request."""

    model: str = ""
    prompt: Any = None
    best_of: int = 0
    echo: bool = False
    frequency_penalty: float = 0.0
    # Keys are token ids as strings, not words.
    logit_bias: dict[str, int] = field(default_factory=dict)
    store: bool = False
    metadata: dict[str, str] = field(default_factory=dict)
    logprobs: int = 0
    max_tokens: int = 0
    n: int = 0
    presence_penalty: float = 0.0
    seed: int | None = None
    stop: list[str] = field(default_factory=list)
    stream: bool = False
    suffix: str = ""
    temperature: float = 0.0
    top_p: float = 0.0
    user: str = ""
    stream_options: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """The JSON payload, leaving out unset fields."""
        payload: dict[str, Any] = {"model": self.model}
        if self.prompt is not None:
            payload["prompt"] = list(self.prompt) if isinstance(self.prompt, tuple) else self.prompt
        optional = {
            "best_of": self.best_of,
            "echo": self.echo,
            "frequency_penalty": self.frequency_penalty,
            "logit_bias": dict(self.logit_bias),
            "store": self.store,
            "metadata": dict(self.metadata),
            "logprobs": self.logprobs,
            "max_tokens": self.max_tokens,
            "n": self.n,
            "presence_penalty": self.presence_penalty,
        }
        payload.update((key, value) for key, value in optional.items() if value)
        if self.seed is not None:
            payload["seed"] = self.seed
        rest = {
            "stop": list(self.stop),
            "stream": self.stream,
            "suffix": self.suffix,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "user": self.user,
        }
        payload.update((key, value) for key, value in rest.items() if value)
        if self.stream_options is not None:
            payload["stream_options"] = dict(self.stream_options)
        return payload


@dataclass
class LogprobResult:
    """Token log-probabilities of one choice."""

    tokens: list[str] = field(default_factory=list)
    token_logprobs: list[float] = field(default_factory=list)
    top_logprobs: list[dict[str, float]] = field(default_factory=list)
    text_offset: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "LogprobResult":
        """Build from a decoded JSON object; null gives an empty result."""
        data = data or {}
        return cls(
            tokens=list(data.get("tokens") or []),
            token_logprobs=list(data.get("token_logprobs") or []),
            top_logprobs=[dict(item or {}) for item in data.get("top_logprobs") or []],
            text_offset=list(data.get("text_offset") or []),
        )


@dataclass
class CompletionChoice:
    """One of the generated completions."""

    text: str = ""
    index: int = 0
    finish_reason: str = ""
    logprobs: LogprobResult = field(default_factory=LogprobResult)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompletionChoice":
        """Build from a decoded JSON object."""
        return cls(
            text=data.get("text") or "",
            index=data.get("index") or 0,
            finish_reason=data.get("finish_reason") or "",
            logprobs=LogprobResult.from_dict(data.get("logprobs")),
        )


@dataclass
class CompletionResponse:
    """The result of a completion request."""

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[CompletionChoice] = field(default_factory=list)
    usage: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompletionResponse":
        """Build from a decoded JSON object."""
        usage = data.get("usage")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created=data.get("created") or 0,
            model=data.get("model") or "",
            choices=[CompletionChoice.from_dict(item) for item in data.get("choices") or []],
            usage=dict(usage) if usage is not None else None,
        )


def create_completion_call(request: CompletionRequest) -> ApiCall:
    """Validate a completion request and describe the API call for it."""
    if request.stream:
        raise CompletionStreamNotSupportedError()
    if not endpoint_supports_model(COMPLETIONS_SUFFIX, request.model):
        raise CompletionUnsupportedModelError()
    if not is_supported_prompt(request.prompt):
        raise CompletionPromptTypeError()
    return ApiCall("POST", COMPLETIONS_SUFFIX, model=request.model, body=request.to_dict())