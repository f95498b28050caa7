"""Writing multipart/form-data request bodies."""

from __future__ import annotations

import os
import secrets
from typing import Any, BinaryIO

_CHUNK_SIZE = 64 * 1024
_QUOTE_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"'})
_SEPARATORS = "/" if os.sep == "/" else "/" + os.sep


def _escape_quotes(text: str) -> str:
    return text.translate(_QUOTE_ESCAPES)


def _base_name(path: str) -> str:
    if path == "":
        return "."
    stripped = path.rstrip(_SEPARATORS)
    if stripped == "":
        return os.sep
    for sep in _SEPARATORS:
        stripped = stripped.rsplit(sep, 1)[-1]
    return stripped


class FormBuilder:
    """Writes form fields and files as multipart/form-data into a binary stream."""

    def __init__(self, body: BinaryIO) -> None:
        self._body = body
        self._boundary = secrets.token_hex(30)
        self._has_parts = False

    def __enter__(self) -> "FormBuilder":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()

    @property
    def boundary(self) -> str:
        return self._boundary

    def create_form_file(self, fieldname: str, file: Any) -> None:
        """Add an open file as a part, named after the file's own name."""
        name = getattr(file, "name", "")
        self._create_form_file(fieldname, file, name if isinstance(name, str) else str(name))

    def create_form_file_reader(self, fieldname: str, reader: Any, filename: str = "") -> None:
        """Add a readable object as a file part.

        Without a filename, the reader's ``name`` attribute is used; a
        ``content_type`` attribute on the reader sets the part's Content-Type.
        """
        if not filename:
            name = getattr(reader, "name", "")
            if isinstance(name, str):
                filename = name
        content_type = getattr(reader, "content_type", "") or ""

        headers = [
            (
                "Content-Disposition",
                f'form-data; name="{_escape_quotes(fieldname)}"; '
                f'filename="{_escape_quotes(_base_name(filename))}"',
            )
        ]
        if content_type:
            headers.append(("Content-Type", content_type))
        self._start_part(headers)
        self._copy(reader)

    def _create_form_file(self, fieldname: str, reader: Any, filename: str) -> None:
        if not filename:
            raise ValueError("filename cannot be empty")
        self._start_part(
            [
                (
                    "Content-Disposition",
                    f'form-data; name="{_escape_quotes(fieldname)}"; filename="{_escape_quotes(filename)}"',
                ),
                ("Content-Type", "application/octet-stream"),
            ]
        )
        self._copy(reader)

    def write_field(self, fieldname: str, value: str) -> None:
        """Add a plain form field."""
        if not fieldname:
            raise ValueError("fieldname cannot be empty")
        self._start_part([("Content-Disposition", f'form-data; name="{_escape_quotes(fieldname)}"')])
        self._body.write(value.encode("utf-8"))

    def close(self) -> None:
        """Write the closing boundary."""
        self._body.write(f"\r\n--{self._boundary}--\r\n".encode("ascii"))

    def form_data_content_type(self) -> str:
        """The Content-Type header value for the body being written."""
        return f"multipart/form-data; boundary={self._boundary}"

    def _start_part(self, headers: list[tuple[str, str]]) -> None:
        prefix = "\r\n" if self._has_parts else ""
        lines = [f"{prefix}--{self._boundary}\r\n"]
        lines.extend(f"{key}: {value}\r\n" for key, value in headers)
        lines.append("\r\n")
        self._body.write("".join(lines).encode("utf-8"))
        self._has_parts = True

    def _copy(self, reader: Any) -> None:
        while True:
            chunk = reader.read(_CHUNK_SIZE)
            if not chunk:
                return
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            self._body.write(chunk)