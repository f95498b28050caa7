import email
import functools
import io

import pytest

from gptkit.images import (
    CREATE_IMAGE_MODEL_DALL_E_3,
    CREATE_IMAGE_QUALITY_HD,
    CREATE_IMAGE_RESPONSE_FORMAT_URL,
    CREATE_IMAGE_SIZE_1024X1024,
    CREATE_IMAGE_STYLE_VIVID,
    ImageEditRequest,
    ImageRequest,
    ImageResponse,
    ImageVariRequest,
    create_edit_image_call,
    create_image_call,
    create_vari_image_call,
    wrap_reader,
)


class MockFailure(Exception):
    pass


class MockBuilder:
    def __init__(self, body, fail_on=frozenset()):
        self.fail_on = fail_on
        self.calls = []

    def create_form_file_reader(self, fieldname, reader, filename=""):
        self.calls.append(fieldname)
        if fieldname in self.fail_on:
            raise MockFailure(fieldname)

    def write_field(self, fieldname, value):
        self.calls.append(fieldname)
        if fieldname in self.fail_on:
            raise MockFailure(fieldname)

    def close(self):
        self.calls.append("close")
        if "close" in self.fail_on:
            raise MockFailure("close")

    def form_data_content_type(self):
        return ""


def _parts(call):
    raw = b"Content-Type: " + call.content_type.encode("ascii") + b"\r\n\r\n" + call.body
    message = email.message_from_bytes(raw)
    return {part.get_param("name", header="content-disposition"): part for part in message.get_payload()}


@pytest.fixture
def image_files(tmp_path):
    (tmp_path / "image.png").write_bytes(b"")
    (tmp_path / "mask.png").write_bytes(b"")
    with open(tmp_path / "image.png", "rb") as origin, open(tmp_path / "mask.png", "rb") as mask:
        yield origin, mask


def test_create_image_call():
    call = create_image_call(
        ImageRequest(
            prompt="Lorem ipsum",
            model=CREATE_IMAGE_MODEL_DALL_E_3,
            n=1,
            quality=CREATE_IMAGE_QUALITY_HD,
            size=CREATE_IMAGE_SIZE_1024X1024,
            style=CREATE_IMAGE_STYLE_VIVID,
            response_format=CREATE_IMAGE_RESPONSE_FORMAT_URL,
            user="user",
        )
    )
    assert call.method == "POST"
    assert call.path == "/images/generations"
    assert call.model == "dall-e-3"
    assert call.body == {
        "prompt": "Lorem ipsum",
        "model": "dall-e-3",
        "n": 1,
        "quality": "hd",
        "size": "1024x1024",
        "style": "vivid",
        "response_format": "url",
        "user": "user",
    }


def test_image_request_omits_empty_fields():
    assert ImageRequest(prompt="x").to_dict() == {"prompt": "x"}


def test_image_response_from_dict():
    response = ImageResponse.from_dict(
        {
            "created": 5,
            "data": [{"url": "test-url1"}, {"b64_json": "e30K"}],
            "usage": {"total_tokens": 3, "input_tokens_details": {"text_tokens": 2}},
        }
    )
    assert response.created == 5
    assert [item.url for item in response.data] == ["test-url1", ""]
    assert response.data[1].b64_json == "e30K"
    assert response.usage.total_tokens == 3
    assert response.usage.input_tokens_details.text_tokens == 2


def test_image_edit(image_files):
    origin, mask = image_files
    call = create_edit_image_call(
        ImageEditRequest(
            image=origin,
            mask=mask,
            prompt="There is a turtle in the pool",
            n=3,
            size=CREATE_IMAGE_SIZE_1024X1024,
            response_format=CREATE_IMAGE_RESPONSE_FORMAT_URL,
        )
    )
    assert call.path == "/images/edits"
    assert call.content_type.startswith("multipart/form-data; boundary=")
    parts = _parts(call)
    assert list(parts) == ["image", "mask", "prompt", "n", "size", "response_format"]
    assert parts["image"].get_filename() == "image.png"
    assert parts["mask"].get_filename() == "mask.png"
    assert parts["prompt"].get_payload(decode=True) == b"There is a turtle in the pool"
    assert parts["n"].get_payload(decode=True) == b"3"
    assert parts["size"].get_payload(decode=True) == b"1024x1024"


def test_image_edit_without_mask(image_files):
    origin, _ = image_files
    call = create_edit_image_call(ImageEditRequest(image=origin, prompt="p", n=3))
    assert "mask" not in _parts(call)


def test_image_variation(image_files):
    origin, _ = image_files
    call = create_vari_image_call(
        ImageVariRequest(image=origin, n=3, size=CREATE_IMAGE_SIZE_1024X1024, response_format="url")
    )
    assert call.path == "/images/variations"
    parts = _parts(call)
    assert list(parts) == ["image", "n", "size", "response_format"]
    assert parts["response_format"].get_payload(decode=True) == b"url"


def test_wrapped_reader_content_type_in_form():
    reader = wrap_reader(io.BytesIO(b"png-bytes"), "file.png", "image/png")
    call = create_vari_image_call(ImageVariRequest(image=reader, n=1))
    part = _parts(call)["image"]
    assert part.get_content_type() == "image/png"
    assert part.get_payload(decode=True) == b"png-bytes"


@pytest.mark.parametrize("failing", ["image", "mask", "prompt", "n", "size", "response_format", "close"])
def test_edit_image_form_builder_failures(failing):
    factory = functools.partial(MockBuilder, fail_on={failing})
    request = ImageEditRequest(image=io.BytesIO(), mask=io.BytesIO())
    with pytest.raises(MockFailure) as info:
        create_edit_image_call(request, factory)
    assert str(info.value) == failing


@pytest.mark.parametrize("failing", ["image", "n", "size", "response_format", "close"])
def test_vari_image_form_builder_failures(failing):
    factory = functools.partial(MockBuilder, fail_on={failing})
    with pytest.raises(MockFailure) as info:
        create_vari_image_call(ImageVariRequest(image=io.BytesIO()), factory)
    assert str(info.value) == failing


def test_edit_image_stops_at_first_failure():
    builders = []

    def factory(body):
        builder = MockBuilder(body, fail_on={"prompt"})
        builders.append(builder)
        return builder

    with pytest.raises(MockFailure):
        create_edit_image_call(ImageEditRequest(image=io.BytesIO(), mask=io.BytesIO()), factory)
    assert builders[0].calls == ["image", "mask", "prompt"]


class NamedReader:
    name = "named.txt"

    def __init__(self, data):
        self._data = io.BytesIO(data)

    def read(self, size=-1):
        return self._data.read(size)


def test_wrap_reader():
    wrapped = wrap_reader(io.BytesIO(b"data"), "file.png", "image/png")
    assert wrapped.name == "file.png"
    assert wrapped.content_type == "image/png"
    assert wrapped.read(-1) == b"data"

    wrapped = wrap_reader(NamedReader(b"d"), "", "text/plain")
    assert wrapped.name == "named.txt"
    assert wrapped.content_type == "text/plain"

    wrapped = wrap_reader(io.BytesIO(), "", "")
    assert wrapped.name == ""