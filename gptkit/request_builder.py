"""Building HTTP requests and converting JSON payloads."""

from __future__ import annotations

import json
import string
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlsplit

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def _encode_default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JSONMarshaller:
    """Serialises values to compact JSON bytes."""

    def marshal(self, value: Any) -> bytes:
        """Encode a value; objects with a ``to_dict`` method are encoded through it."""
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_encode_default).encode(
            "utf-8"
        )


class JSONUnmarshaler:
    """Parses JSON bytes or text."""

    def unmarshal(self, data: bytes | str | None) -> Any:
        """Decode JSON; raise ValueError on empty or malformed input."""
        return json.loads(b"" if data is None else data)


@dataclass
class HTTPRequest:
    """A request ready to be sent."""

    method: str
    url: str
    body: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiCall:
    """Description of one API request: method, path suffix, model and payload."""

    method: str
    path: str
    model: str = ""
    body: Any = None
    extra_body: Mapping[str, Any] | None = None
    content_type: str | None = None
    raw_response: bool = False


def _check_method(method: str) -> None:
    if not all(char in _TOKEN_CHARS for char in method):
        raise ValueError(f"invalid method {method!r}")


def _check_url(url: str) -> None:
    if any(ord(char) < 0x20 or ord(char) == 0x7F for char in url):
        raise ValueError("invalid control character in URL")
    if url.startswith(":"):
        raise ValueError("missing protocol scheme")
    urlsplit(url)


class RequestBuilder:
    """Turns a method, URL and body into an HTTPRequest."""

    def __init__(self, marshaller: JSONMarshaller | None = None) -> None:
        self._marshaller = marshaller if marshaller is not None else JSONMarshaller()

    def build(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPRequest:
        """Build a request; readable bodies and bytes are sent as is, others as JSON."""
        payload: bytes | None = None
        if body is not None:
            if isinstance(body, (bytes, bytearray)):
                payload = bytes(body)
            elif hasattr(body, "read"):
                data = body.read()
                payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
            else:
                payload = self._marshaller.marshal(body)

        method = method or "GET"
        _check_method(method)
        _check_url(url)
        return HTTPRequest(method, url, payload, dict(headers) if headers is not None else {})