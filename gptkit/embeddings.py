"""Embedding requests, responses and vector helpers."""

from __future__ import annotations

import base64
import json
import struct
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping

from gptkit.errors import VectorLengthMismatchError
from gptkit.request_builder import ApiCall, JSONMarshaller


class EmbeddingModel(str, Enum):
    """Models that produce embedding vectors."""

    # Shut down; use text-embedding-ada-002 instead.
    ADA_SIMILARITY = "text-similarity-ada-001"
    BABBAGE_SIMILARITY = "text-similarity-babbage-001"
    CURIE_SIMILARITY = "text-similarity-curie-001"
    DAVINCI_SIMILARITY = "text-similarity-davinci-001"
    ADA_SEARCH_DOCUMENT = "text-search-ada-doc-001"
    ADA_SEARCH_QUERY = "text-search-ada-query-001"
    BABBAGE_SEARCH_DOCUMENT = "text-search-babbage-doc-001"
    BABBAGE_SEARCH_QUERY = "text-search-babbage-query-001"
    CURIE_SEARCH_DOCUMENT = "text-search-curie-doc-001"
    CURIE_SEARCH_QUERY = "text-search-curie-query-001"
    DAVINCI_SEARCH_DOCUMENT = "text-search-davinci-doc-001"
    DAVINCI_SEARCH_QUERY = "text-search-davinci-query-001"
    ADA_CODE_SEARCH_CODE = "code-search-ada-code-001"
    ADA_CODE_SEARCH_TEXT = "code-search-ada-text-001"
    BABBAGE_CODE_SEARCH_CODE = "code-search-babbage-code-001"
    BABBAGE_CODE_SEARCH_TEXT = "code-search-babbage-text-001"

    ADA_EMBEDDING_V2 = "text-embedding-ada-002"
    SMALL_EMBEDDING_3 = "text-embedding-3-small"
    LARGE_EMBEDDING_3 = "text-embedding-3-large"


class EmbeddingEncodingFormat(str, Enum):
    """How the API encodes embedding vectors; float is the API's default."""

    FLOAT = "float"
    BASE64 = "base64"


def _name(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return "" if value is None else str(value)


@dataclass
class Embedding:
    """One embedding vector and its position in the request."""

    object: str = ""
    embedding: list[float] = field(default_factory=list)
    index: int = 0

    def dot_product(self, other: "Embedding") -> float:
        """Dot product with another vector of the same length."""
        if len(self.embedding) != len(other.embedding):
            raise VectorLengthMismatchError()
        return sum(a * b for a, b in zip(self.embedding, other.embedding))


def _embedding_from_dict(data: Mapping[str, Any]) -> Embedding:
    return Embedding(
        object=data.get("object") or "",
        embedding=[float(x) for x in data.get("embedding") or []],
        index=data.get("index") or 0,
    )


def decode_base64_floats(data: str | bytes) -> list[float]:
    """Decode base64 little-endian float32 values; trailing partial bytes are ignored."""
    raw = base64.b64decode(data, validate=True)
    count = len(raw) // 4
    return list(struct.unpack(f"<{count}f", raw[: count * 4]))


@dataclass
class Base64Embedding:
    """An embedding whose vector is still base64 encoded."""

    object: str = ""
    embedding: str = ""
    index: int = 0


@dataclass
class EmbeddingResponse:
    """The result of an embeddings request."""

    object: str = ""
    data: list[Embedding] = field(default_factory=list)
    model: str = ""
    usage: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmbeddingResponse":
        """Build from a decoded JSON object."""
        return cls(
            object=data.get("object") or "",
            data=[_embedding_from_dict(item) for item in data.get("data") or []],
            model=data.get("model") or "",
            usage=dict(data.get("usage") or {}),
        )


@dataclass
class EmbeddingResponseBase64:
    """The result of an embeddings request made with base64 encoding."""

    object: str = ""
    data: list[Base64Embedding] = field(default_factory=list)
    model: str = ""
    usage: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmbeddingResponseBase64":
        """Build from a decoded JSON object."""
        return cls(
            object=data.get("object") or "",
            data=[
                Base64Embedding(
                    object=item.get("object") or "",
                    embedding=item.get("embedding") or "",
                    index=item.get("index") or 0,
                )
                for item in data.get("data") or []
            ],
            model=data.get("model") or "",
            usage=dict(data.get("usage") or {}),
        )

    def to_embedding_response(self) -> EmbeddingResponse:
        """Decode every vector; raise ValueError on invalid base64."""
        return EmbeddingResponse(
            object=self.object,
            data=[
                Embedding(object=item.object, embedding=decode_base64_floats(item.embedding), index=item.index)
                for item in self.data
            ],
            model=self.model,
            usage=dict(self.usage),
        )


@dataclass
class EmbeddingRequest:
    """An embeddings request with input of any JSON-encodable shape."""

    input: Any = None
    model: EmbeddingModel | str = ""
    user: str = ""
    encoding_format: EmbeddingEncodingFormat | str = ""
    # Only text-embedding-3 and later models accept dimensions.
    dimensions: int = 0
    # Extra top-level fields merged into the request body.
    extra_body: dict[str, Any] | None = None

    def convert(self) -> "EmbeddingRequest":
        return self

    def to_dict(self) -> dict[str, Any]:
        """The JSON payload, leaving out unset optional fields."""
        payload: dict[str, Any] = {"input": self.input, "model": _name(self.model)}
        if self.user:
            payload["user"] = self.user
        encoding = _name(self.encoding_format)
        if encoding:
            payload["encoding_format"] = encoding
        if self.dimensions:
            payload["dimensions"] = self.dimensions
        if self.extra_body:
            payload["extra_body"] = dict(self.extra_body)
        return payload


@dataclass
class EmbeddingRequestStrings:
    """An embeddings request over a list of strings."""

    input: list[str] = field(default_factory=list)
    model: EmbeddingModel | str = ""
    user: str = ""
    encoding_format: EmbeddingEncodingFormat | str = ""
    dimensions: int = 0
    extra_body: dict[str, Any] | None = None

    def convert(self) -> EmbeddingRequest:
        return EmbeddingRequest(
            input=list(self.input),
            model=self.model,
            user=self.user,
            encoding_format=self.encoding_format,
            dimensions=self.dimensions,
            extra_body=self.extra_body,
        )


@dataclass
class EmbeddingRequestTokens:
    """An embeddings request over lists of token ids."""

    input: list[list[int]] = field(default_factory=list)
    model: EmbeddingModel | str = ""
    user: str = ""
    encoding_format: EmbeddingEncodingFormat | str = ""
    dimensions: int = 0
    extra_body: dict[str, Any] | None = None

    def convert(self) -> EmbeddingRequest:
        return EmbeddingRequest(
            input=[list(tokens) for tokens in self.input],
            model=self.model,
            user=self.user,
            encoding_format=self.encoding_format,
            dimensions=self.dimensions,
            extra_body=self.extra_body,
        )


def create_embeddings_call(request: Any) -> ApiCall:
    """Describe the API call for any request with a ``convert`` method.

    Raises TypeError if the input cannot be encoded as JSON.
    """
    base = request.convert()
    extra_body = dict(base.extra_body) if base.extra_body else None
    body = json.loads(JSONMarshaller().marshal(replace(base, extra_body=None).to_dict()))
    return ApiCall("POST", "/embeddings", model=_name(base.model), body=body, extra_body=extra_body)


def parse_embeddings_response(request: Any, data: Mapping[str, Any] | str | bytes) -> EmbeddingResponse:
    """Parse the reply to a request, decoding base64 vectors when they were asked for."""
    base = request.convert()
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    if _name(base.encoding_format) != EmbeddingEncodingFormat.BASE64.value:
        return EmbeddingResponse.from_dict(data)
    return EmbeddingResponseBase64.from_dict(data).to_embedding_response()