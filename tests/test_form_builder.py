import email
import io

import pytest

from gptkit.form_builder import FormBuilder


class MockWriterError(Exception):
    pass


class MockReaderError(Exception):
    pass


class FailingWriter:
    def write(self, data):
        raise MockWriterError("mock writer failed")


class FailingReader:
    def read(self, size=-1):
        raise MockReaderError("mock reader failed")


class NamedPngReader:
    name = ""
    content_type = "image/png"

    def __init__(self, data):
        self._stream = io.BytesIO(data)

    def read(self, size=-1):
        return self._stream.read(size)


def _parts(builder, body):
    raw = b"Content-Type: " + builder.form_data_content_type().encode() + b"\r\n\r\n" + body.getvalue()
    return email.message_from_bytes(raw).get_payload()


def test_normal_close_writes_terminator():
    body = io.BytesIO()
    builder = FormBuilder(body)
    builder.close()
    boundary = builder.form_data_content_type().split("boundary=")[1]
    assert body.getvalue() == f"\r\n--{boundary}--\r\n".encode()


def test_context_manager_closes():
    body = io.BytesIO()
    with FormBuilder(body) as builder:
        builder.write_field("key", "value")
    assert body.getvalue().endswith(f"--{builder.boundary}--\r\n".encode())


def test_failing_writer_with_file(tmp_path):
    path = tmp_path / "upload"
    path.write_bytes(b"data")
    with open(path, "rb") as handle:
        builder = FormBuilder(FailingWriter())
        with pytest.raises(MockWriterError):
            builder.create_form_file("file", handle)


def test_closed_file_raises(tmp_path):
    path = tmp_path / "upload"
    path.write_bytes(b"data")
    handle = open(path, "rb")
    handle.close()
    builder = FormBuilder(io.BytesIO())
    with pytest.raises(ValueError):
        builder.create_form_file("file", handle)


def test_create_form_file_round_trip(tmp_path):
    path = tmp_path / "upload.jsonl"
    path.write_bytes(b"data")
    body = io.BytesIO()
    builder = FormBuilder(body)
    with open(path, "rb") as handle:
        builder.create_form_file("file", handle)
    builder.close()
    (part,) = _parts(builder, body)
    assert part.get_filename() == str(path)
    assert part.get_content_type() == "application/octet-stream"
    assert part.get_payload(decode=True) == b"data"


def test_reader_with_failing_writer(tmp_path):
    path = tmp_path / "upload"
    path.write_bytes(b"data")
    with open(path, "rb") as handle:
        builder = FormBuilder(FailingWriter())
        with pytest.raises(MockWriterError):
            builder.create_form_file_reader("file", handle, handle.name)


def test_reader_failure_propagates():
    builder = FormBuilder(io.BytesIO())
    with pytest.raises(MockReaderError):
        builder.create_form_file_reader("file", FailingReader(), "")


def test_anonymous_reader_gets_dot_filename():
    body = io.BytesIO()
    builder = FormBuilder(body)
    builder.create_form_file_reader("file", io.BytesIO(b"abc"), "")
    builder.close()
    (part,) = _parts(builder, body)
    assert part.get_filename() == "."
    assert part.get_payload(decode=True) == b"abc"


def test_reader_with_name_and_content_type():
    body = io.BytesIO()
    builder = FormBuilder(body)
    builder.create_form_file_reader("image", NamedPngReader(b"png"), "")
    builder.close()
    (part,) = _parts(builder, body)
    assert part.get_content_type() == "image/png"
    assert part.get_param("name", header="content-disposition") == "image"
    assert part.get_payload(decode=True) == b"png"


def test_reader_filename_is_base_name():
    body = io.BytesIO()
    builder = FormBuilder(body)
    builder.create_form_file_reader("file", io.BytesIO(b"x"), "dir/sub/pic.png")
    assert b'filename="pic.png"' in body.getvalue()


def test_form_data_content_type():
    builder = FormBuilder(io.BytesIO())
    assert builder.form_data_content_type().startswith("multipart/form-data; boundary=")


def test_write_field_empty_name_raises():
    builder = FormBuilder(io.BytesIO())
    with pytest.raises(ValueError):
        builder.write_field("", "some value")


def test_write_fields_round_trip():
    body = io.BytesIO()
    builder = FormBuilder(body)
    builder.write_field("key", "value")
    builder.write_field("purpose", "fine-tune")
    builder.close()
    parts = _parts(builder, body)
    assert [p.get_param("name", header="content-disposition") for p in parts] == ["key", "purpose"]
    assert [p.get_payload(decode=True) for p in parts] == [b"value", b"fine-tune"]


def test_field_name_quotes_are_escaped():
    body = io.BytesIO()
    builder = FormBuilder(body)
    builder.write_field('a"b', "v")
    assert b'name="a\\"b"' in body.getvalue()


def test_private_create_form_file_empty_name_raises():
    builder = FormBuilder(io.BytesIO())
    with pytest.raises(ValueError):
        builder._create_form_file("file", io.BytesIO(b"data"), "")


def test_private_create_form_file_writer_error():
    builder = FormBuilder(FailingWriter())
    with pytest.raises(MockWriterError):
        builder._create_form_file("file", io.BytesIO(b"data"), "name")


def test_private_create_form_file_success():
    body = io.BytesIO()
    builder = FormBuilder(body)
    builder._create_form_file("file", io.BytesIO(b"data"), "foo.txt")
    assert b'filename="foo.txt"' in body.getvalue()