"""File upload, listing, retrieval and deletion."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, BinaryIO, Callable, Mapping

from gptkit.form_builder import FormBuilder
from gptkit.request_builder import ApiCall

BuilderFactory = Callable[[BinaryIO], Any]


class PurposeType(str, Enum):
    """What an uploaded file is for."""

    FINE_TUNE = "fine-tune"
    FINE_TUNE_RESULTS = "fine-tune-results"
    ASSISTANTS = "assistants"
    ASSISTANTS_OUTPUT = "assistants_output"
    BATCH = "batch"


def _text(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return "" if value is None else str(value)


@dataclass
class FileRequest:
    """Upload of a local file."""

    file_name: str = ""
    file_path: str = ""
    purpose: str = ""


@dataclass
class FileBytesRequest:
    """Upload of in-memory content under a given name."""

    name: str = ""
    content: bytes = b""
    purpose: PurposeType | str = ""


@dataclass
class File:
    """A file stored by the API."""

    bytes: int = 0
    created_at: int = 0
    id: str = ""
    filename: str = ""
    object: str = ""
    status: str = ""
    purpose: str = ""
    status_details: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "File":
        """Build from a decoded JSON object."""
        return cls(
            bytes=data.get("bytes") or 0,
            created_at=data.get("created_at") or 0,
            id=data.get("id") or "",
            filename=data.get("filename") or "",
            object=data.get("object") or "",
            status=data.get("status") or "",
            purpose=data.get("purpose") or "",
            status_details=data.get("status_details") or "",
        )


@dataclass
class FilesList:
    """The files belonging to the user or organisation."""

    files: list[File] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilesList":
        """Build from a decoded JSON object."""
        return cls(files=[File.from_dict(item) for item in data.get("data") or []])


def _upload_call(body: io.BytesIO, form: Any) -> ApiCall:
    return ApiCall("POST", "/files", body=body.getvalue(), content_type=form.form_data_content_type())


def create_file_bytes_call(request: FileBytesRequest, builder: BuilderFactory | None = None) -> ApiCall:
    """Write the multipart body for an in-memory upload and describe the API call."""
    body = io.BytesIO()
    form = (builder or FormBuilder)(body)
    form.write_field("purpose", _text(request.purpose))
    form.create_form_file_reader("file", io.BytesIO(request.content), request.name)
    form.close()
    return _upload_call(body, form)


def create_file_call(request: FileRequest, builder: BuilderFactory | None = None) -> ApiCall:
    """Write the multipart body for a local file upload and describe the API call.

    Raises FileNotFoundError if the file path does not exist.
    """
    body = io.BytesIO()
    form = (builder or FormBuilder)(body)
    form.write_field("purpose", _text(request.purpose))
    with open(request.file_path, "rb") as handle:
        form.create_form_file("file", handle)
    form.close()
    return _upload_call(body, form)


def delete_file_call(file_id: str) -> ApiCall:
    """Describe the API call that deletes a file."""
    return ApiCall("DELETE", f"/files/{file_id}")


def list_files_call() -> ApiCall:
    """Describe the API call that lists files."""
    return ApiCall("GET", "/files")


def get_file_call(file_id: str) -> ApiCall:
    """Describe the API call that retrieves a file's details."""
    return ApiCall("GET", f"/files/{file_id}")


def get_file_content_call(file_id: str) -> ApiCall:
    """Describe the API call that downloads a file's raw content."""
    return ApiCall("GET", f"/files/{file_id}/content", raw_response=True)