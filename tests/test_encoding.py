"""Tests for data URL parsing and serialization."""

import base64

import pytest

from prismalens.models.schemas import EncodedImage
from prismalens.utils import encoding
from prismalens.utils.errors import MalformedEncodingError

from conftest import RED, make_image_bytes


def data_url(media_type: str, payload: bytes) -> str:
    return f"data:{media_type};base64,{base64.b64encode(payload).decode('ascii')}"


PNG_BYTES = make_image_bytes(RED)
PNG_URL = data_url("image/png", PNG_BYTES)


@pytest.mark.parametrize(
    "media_type,image_format",
    [
        ("image/png", "PNG"),
        ("image/jpeg", "JPEG"),
        ("image/jpg", "JPEG"),
        ("image/gif", "GIF"),
        ("image/bmp", "BMP"),
    ],
)
def test_parse_then_serialize_reproduces_string(media_type, image_format):
    source = data_url(media_type, make_image_bytes(RED, image_format=image_format))

    image = encoding.parse(source)

    assert image.media_type == media_type
    assert encoding.serialize(image) == source


def test_serialize_then_parse_reproduces_image():
    image = EncodedImage(media_type="image/png", payload=PNG_BYTES)

    assert encoding.parse(encoding.serialize(image)) == image


def test_parse_decodes_payload():
    image = encoding.parse(PNG_URL)

    assert image.payload == PNG_BYTES
    assert image.size_bytes == len(PNG_BYTES)


@pytest.mark.parametrize(
    "value",
    [
        "",
        PNG_URL[len("data:"):],
        PNG_URL.replace(";base64,", ","),
        PNG_URL.replace(";base64,", ";"),
        "data:image/png;base64,",
        "data:;base64," + PNG_URL.split(",", 1)[1],
        " " + PNG_URL,
        PNG_URL + "\n",
        PNG_URL[:40] + "\n" + PNG_URL[40:],
        "data:image/png;base64,@@@@",
        "data:image/png;base64,iVBORw0KGgo",
        "data:image/png;charset=utf-8;base64," + PNG_URL.split(",", 1)[1],
    ],
)
def test_parse_rejects_malformed_strings(value):
    with pytest.raises(MalformedEncodingError):
        encoding.parse(value)


@pytest.mark.parametrize("value", [None, 42, b"data:image/png;base64,AAAA"])
def test_parse_rejects_non_strings(value):
    with pytest.raises(MalformedEncodingError):
        encoding.parse(value)


def test_parse_rejects_payload_that_is_not_an_image():
    with pytest.raises(MalformedEncodingError):
        encoding.parse(data_url("image/png", b"definitely not a png"))


def test_parse_rejects_media_type_mismatch():
    with pytest.raises(MalformedEncodingError):
        encoding.parse(data_url("image/jpeg", PNG_BYTES))


def test_parse_rejects_non_image_media_type():
    with pytest.raises(MalformedEncodingError):
        encoding.parse(data_url("text/plain", PNG_BYTES))


def test_encoded_image_is_immutable():
    image = encoding.parse(PNG_URL)

    with pytest.raises(Exception):
        image.media_type = "image/jpeg"


def test_from_bytes_detects_media_type():
    jpeg = make_image_bytes(RED, image_format="JPEG")

    image = encoding.from_bytes(jpeg)

    assert image.media_type == "image/jpeg"
    assert image.payload == jpeg


def test_from_bytes_rejects_garbage():
    with pytest.raises(MalformedEncodingError):
        encoding.from_bytes(b"\x00\x01\x02")
