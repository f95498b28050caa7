"""Image generation, edit and variation requests and responses."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable, Mapping

from gptkit.form_builder import FormBuilder
from gptkit.request_builder import ApiCall

CREATE_IMAGE_SIZE_256X256 = "256x256"
CREATE_IMAGE_SIZE_512X512 = "512x512"
CREATE_IMAGE_SIZE_1024X1024 = "1024x1024"
# dall-e-3 only.
CREATE_IMAGE_SIZE_1792X1024 = "1792x1024"
CREATE_IMAGE_SIZE_1024X1792 = "1024x1792"
# gpt-image-1 only.
CREATE_IMAGE_SIZE_1536X1024 = "1536x1024"
CREATE_IMAGE_SIZE_1024X1536 = "1024x1536"

# dall-e-2 and dall-e-3 only.
CREATE_IMAGE_RESPONSE_FORMAT_B64_JSON = "b64_json"
CREATE_IMAGE_RESPONSE_FORMAT_URL = "url"

CREATE_IMAGE_MODEL_DALL_E_2 = "dall-e-2"
CREATE_IMAGE_MODEL_DALL_E_3 = "dall-e-3"
CREATE_IMAGE_MODEL_GPT_IMAGE_1 = "gpt-image-1"

CREATE_IMAGE_QUALITY_HD = "hd"
CREATE_IMAGE_QUALITY_STANDARD = "standard"
# gpt-image-1 only.
CREATE_IMAGE_QUALITY_HIGH = "high"
CREATE_IMAGE_QUALITY_MEDIUM = "medium"
CREATE_IMAGE_QUALITY_LOW = "low"

# dall-e-3 only.
CREATE_IMAGE_STYLE_VIVID = "vivid"
CREATE_IMAGE_STYLE_NATURAL = "natural"

# gpt-image-1 only.
CREATE_IMAGE_BACKGROUND_TRANSPARENT = "transparent"
CREATE_IMAGE_BACKGROUND_OPAQUE = "opaque"
CREATE_IMAGE_MODERATION_LOW = "low"
CREATE_IMAGE_OUTPUT_FORMAT_PNG = "png"
CREATE_IMAGE_OUTPUT_FORMAT_JPEG = "jpeg"
CREATE_IMAGE_OUTPUT_FORMAT_WEBP = "webp"

BuilderFactory = Callable[[BinaryIO], Any]


@dataclass
class ImageRequest:
    """Parameters of an image generation request."""

    prompt: str = ""
    model: str = ""
    n: int = 0
    quality: str = ""
    size: str = ""
    style: str = ""
    response_format: str = ""
    user: str = ""
    background: str = ""
    moderation: str = ""
    output_compression: int = 0
    output_format: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON payload, leaving out unset fields."""
        fields = {
            "prompt": self.prompt,
            "model": self.model,
            "n": self.n,
            "quality": self.quality,
            "size": self.size,
            "style": self.style,
            "response_format": self.response_format,
            "user": self.user,
            "background": self.background,
            "moderation": self.moderation,
            "output_compression": self.output_compression,
            "output_format": self.output_format,
        }
        return {key: value for key, value in fields.items() if value}


@dataclass
class ImageResponseInputTokensDetails:
    """Breakdown of the input tokens."""

    text_tokens: int = 0
    image_tokens: int = 0


@dataclass
class ImageResponseUsage:
    """Token usage of an image request."""

    total_tokens: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    input_tokens_details: ImageResponseInputTokensDetails = field(
        default_factory=ImageResponseInputTokensDetails
    )


@dataclass
class ImageResponseDataInner:
    """One generated image, as a URL or base64 JSON."""

    url: str = ""
    b64_json: str = ""
    revised_prompt: str = ""


def _usage_from_dict(data: Mapping[str, Any] | None) -> ImageResponseUsage:
    data = data or {}
    details = data.get("input_tokens_details") or {}
    return ImageResponseUsage(
        total_tokens=data.get("total_tokens") or 0,
        input_tokens=data.get("input_tokens") or 0,
        output_tokens=data.get("output_tokens") or 0,
        input_tokens_details=ImageResponseInputTokensDetails(
            text_tokens=details.get("text_tokens") or 0,
            image_tokens=details.get("image_tokens") or 0,
        ),
    )


@dataclass
class ImageResponse:
    """The result of an image request."""

    created: int = 0
    data: list[ImageResponseDataInner] = field(default_factory=list)
    usage: ImageResponseUsage = field(default_factory=ImageResponseUsage)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImageResponse":
        """Build from a decoded JSON object."""
        return cls(
            created=data.get("created") or 0,
            data=[
                ImageResponseDataInner(
                    url=item.get("url") or "",
                    b64_json=item.get("b64_json") or "",
                    revised_prompt=item.get("revised_prompt") or "",
                )
                for item in data.get("data") or []
            ],
            usage=_usage_from_dict(data.get("usage")),
        )


class WrappedReader:
    """A readable object carrying a file name and a content type."""

    def __init__(self, reader: Any, filename: str = "", content_type: str = "") -> None:
        self._reader = reader
        self._name = filename
        self.content_type = content_type

    @property
    def name(self) -> str:
        """The given name, else the wrapped reader's own name, else empty."""
        if self._name:
            return self._name
        inner = getattr(self._reader, "name", "")
        return inner if isinstance(inner, str) else ""

    def read(self, size: int = -1) -> Any:
        """Read from the wrapped reader."""
        return self._reader.read(size)


def wrap_reader(reader: Any, filename: str = "", content_type: str = "") -> WrappedReader:
    """Attach a file name and content type to a reader for upload."""
    return WrappedReader(reader, filename, content_type)


@dataclass
class ImageEditRequest:
    """Parameters of an image edit request; readers may be wrapped with wrap_reader."""

    image: Any = None
    mask: Any = None
    prompt: str = ""
    model: str = ""
    n: int = 0
    size: str = ""
    response_format: str = ""
    quality: str = ""
    user: str = ""


@dataclass
class ImageVariRequest:
    """Parameters of an image variation request."""

    image: Any = None
    model: str = ""
    n: int = 0
    size: str = ""
    response_format: str = ""
    user: str = ""


def create_image_call(request: ImageRequest) -> ApiCall:
    """Describe the API call that generates images."""
    return ApiCall("POST", "/images/generations", model=request.model, body=request.to_dict())


def create_edit_image_call(request: ImageEditRequest, builder: BuilderFactory | None = None) -> ApiCall:
    """Write the multipart body for an image edit and describe the API call.

    ``builder`` creates the form writer from the body stream; errors it raises propagate.
    """
    body = io.BytesIO()
    form = (builder or FormBuilder)(body)
    form.create_form_file_reader("image", request.image, "")
    if request.mask is not None:
        form.create_form_file_reader("mask", request.mask, "")
    form.write_field("prompt", request.prompt)
    form.write_field("n", str(request.n))
    form.write_field("size", request.size)
    form.write_field("response_format", request.response_format)
    form.close()
    return ApiCall(
        "POST",
        "/images/edits",
        model=request.model,
        body=body.getvalue(),
        content_type=form.form_data_content_type(),
    )


def create_vari_image_call(request: ImageVariRequest, builder: BuilderFactory | None = None) -> ApiCall:
    """Write the multipart body for an image variation and describe the API call."""
    body = io.BytesIO()
    form = (builder or FormBuilder)(body)
    form.create_form_file_reader("image", request.image, "")
    form.write_field("n", str(request.n))
    form.write_field("size", request.size)
    form.write_field("response_format", request.response_format)
    form.close()
    return ApiCall(
        "POST",
        "/images/variations",
        model=request.model,
        body=body.getvalue(),
        content_type=form.form_data_content_type(),
    )