"""Errors raised by the API client and parsers for API error payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class InnerError:
    """Azure content-filtering details attached to an API error."""

    code: str = ""
    content_filter_results: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InnerError":
        """Build an inner error from a decoded JSON object."""
        if not isinstance(data, Mapping):
            raise ValueError("inner error must be a JSON object")
        code = data.get("code")
        if code is None:
            code = ""
        elif not isinstance(code, str):
            raise ValueError("inner error code must be a string")
        results = data.get("content_filter_result")
        if results is None:
            results = {}
        elif not isinstance(results, Mapping):
            raise ValueError("content_filter_result must be a JSON object")
        return cls(code=code, content_filter_results=dict(results))


def _parse_message(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(item is None or isinstance(item, str) for item in value):
        return ", ".join(item or "" for item in value)
    raise ValueError("error message must be a string or a list of strings")


def _optional_string(raw: Mapping[str, Any], key: str, default: str | None) -> str | None:
    if key not in raw or raw[key] is None:
        return default
    value = raw[key]
    if not isinstance(value, str):
        raise ValueError(f"error field {key!r} must be a string")
    return value


class APIError(Exception):
    """An error reported by the API in its response body."""

    def __init__(
        self,
        message: str = "",
        *,
        code: Any = None,
        param: str | None = None,
        type: str = "",
        http_status: str = "",
        http_status_code: int = 0,
        inner_error: InnerError | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.param = param
        self.type = type
        self.http_status = http_status
        self.http_status_code = http_status_code
        self.inner_error = inner_error

    def __str__(self) -> str:
        if self.http_status_code > 0:
            return (
                f"error, status code: {self.http_status_code}, "
                f"status: {self.http_status}, message: {self.message}"
            )
        return self.message

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> "APIError":
        """Parse an API error object from JSON text; raise ValueError if it is malformed."""
        return cls._from_mapping(json.loads(data))

    @classmethod
    def _from_mapping(cls, raw: Any) -> "APIError":
        if not isinstance(raw, dict):
            raise ValueError("API error must be a JSON object")
        if "message" not in raw:
            raise ValueError("API error has no message")
        message = _parse_message(raw["message"])
        error_type = _optional_string(raw, "type", "") or ""

        inner_error = None
        if raw.get("innererror") is not None:
            inner_error = InnerError.from_dict(raw["innererror"])

        param = _optional_string(raw, "param", None)

        code: Any = None
        if "code" in raw:
            # A JSON null code decodes to zero, as an absent integer would.
            code = 0 if raw["code"] is None else raw["code"]

        return cls(
            message,
            code=code,
            param=param,
            type=error_type,
            inner_error=inner_error,
        )


class RequestError(Exception):
    """A request failed without a well-formed API error in the response."""

    def __init__(
        self,
        err: BaseException | None = None,
        *,
        http_status: str = "",
        http_status_code: int = 0,
        body: bytes = b"",
    ) -> None:
        super().__init__(err)
        self.err = err
        self.http_status = http_status
        self.http_status_code = http_status_code
        self.body = body
        self.__cause__ = err

    def __str__(self) -> str:
        body = self.body.decode("utf-8", "replace") if isinstance(self.body, (bytes, bytearray)) else str(self.body)
        message = "" if self.err is None else str(self.err)
        return (
            f"error, status code: {self.http_status_code}, status: {self.http_status}, "
            f"message: {message}, body: {body}"
        )


@dataclass
class ErrorResponse:
    """The envelope in which the API returns an error."""

    error: APIError | None = None

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> "ErrorResponse":
        """Parse an error envelope from JSON text."""
        raw = json.loads(data)
        if not isinstance(raw, dict):
            raise ValueError("error response must be a JSON object")
        payload = raw.get("error")
        if payload is None:
            return cls()
        return cls(APIError._from_mapping(payload))


class CompletionStreamNotSupportedError(ValueError):
    """Streaming was requested from a method that does not stream."""

    def __init__(
        self,
        message: str = "streaming is not supported with this method, please use the streaming counterpart",
    ) -> None:
        super().__init__(message)


class CompletionUnsupportedModelError(ValueError):
    """The model cannot be used with the requested endpoint."""

    def __init__(self, message: str = "this model is not supported with this method") -> None:
        super().__init__(message)


class CompletionPromptTypeError(TypeError):
    """The prompt is neither a string nor a list of strings."""

    def __init__(self, message: str = "the type of CompletionRequest.Prompt only supports string and []string") -> None:
        super().__init__(message)


class VectorLengthMismatchError(ValueError):
    """Two embedding vectors have different lengths."""

    def __init__(self, message: str = "vector length mismatch") -> None:
        super().__init__(message)