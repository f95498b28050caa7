"""The retired edits and engines endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from gptkit.request_builder import ApiCall


@dataclass
class EditsRequest:
    """Parameters of an edits request."""

    model: str | None = None
    input: str = ""
    instruction: str = ""
    n: int = 0
    temperature: float = 0.0
    top_p: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """The JSON payload, leaving out unset fields."""
        payload: dict[str, Any] = {}
        if self.model is not None:
            payload["model"] = self.model
        optional = {
            "input": self.input,
            "instruction": self.instruction,
            "n": self.n,
            "temperature": self.temperature,
            "top_p": self.top_p,
        }
        payload.update((key, value) for key, value in optional.items() if value)
        return payload


@dataclass
class EditsChoice:
    """One of the produced edits."""

    text: str = ""
    index: int = 0


@dataclass
class EditsResponse:
    """The result of an edits request."""

    object: str = ""
    created: int = 0
    usage: dict[str, Any] = field(default_factory=dict)
    choices: list[EditsChoice] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditsResponse":
        """Build from a decoded JSON object."""
        return cls(
            object=data.get("object") or "",
            created=data.get("created") or 0,
            usage=dict(data.get("usage") or {}),
            choices=[
                EditsChoice(text=item.get("text") or "", index=item.get("index") or 0)
                for item in data.get("choices") or []
            ],
        )


def edits_call(request: EditsRequest) -> ApiCall:
    """Describe the API call for an edit; the endpoint is retired in favour of chat completions."""
    return ApiCall("POST", "/edits", model=request.model or "", body=request.to_dict())


@dataclass
class Engine:
    """An engine and its availability."""

    id: str = ""
    object: str = ""
    owner: str = ""
    ready: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Engine":
        """Build from a decoded JSON object."""
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            owner=data.get("owner") or "",
            ready=bool(data.get("ready")),
        )


@dataclass
class EnginesList:
    """The available engines."""

    engines: list[Engine] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EnginesList":
        """Build from a decoded JSON object."""
        return cls(engines=[Engine.from_dict(item) for item in data.get("data") or []])


def list_engines_call() -> ApiCall:
    """Describe the API call that lists engines."""
    return ApiCall("GET", "/engines")


def get_engine_call(engine_id: str) -> ApiCall:
    """Describe the API call that retrieves one engine."""
    return ApiCall("GET", f"/engines/{engine_id}")