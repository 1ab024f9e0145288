"""Tests for photo payload decoding."""

import base64

import pytest

from conftest import JPEG_B64, JPEG_BYTES, PNG_B64, PNG_BYTES, WEBP_BYTES
from homefix.utils.errors import ErrorType, MalformedInput, UnsupportedMediaType, ValidationError
from homefix.utils.photo_input import detect_mime_type, normalize_photo, normalize_photos


def test_data_uri_round_trip():
    """A PNG data URI decodes to the same bytes as its payload."""
    photo = normalize_photo(f"data:image/png;base64,{PNG_B64}")

    assert photo.mime_type == "image/png"
    assert photo.format == "png"
    assert photo.data == base64.b64decode(PNG_B64)


def test_normalizing_twice_is_byte_identical():
    inputs = [
        JPEG_B64,
        f"data:image/png;base64,{PNG_B64}",
        {"data": PNG_B64, "mimeType": "image/png", "annotations": [{"x": 1, "y": 2}]},
    ]

    first = normalize_photos(inputs)
    second = normalize_photos(inputs)

    assert [p.data for p in first] == [p.data for p in second]
    assert [p.mime_type for p in first] == [p.mime_type for p in second]


def test_data_uri_mime_type_overrides_explicit_mime_type():
    photo = normalize_photo({"data": f"data:image/png;base64,{PNG_B64}", "mimeType": "image/jpeg"})

    assert photo.mime_type == "image/png"


def test_explicit_mime_type_is_used_for_bare_base64():
    photo = normalize_photo({"data": PNG_B64, "mimeType": "image/webp"})

    assert photo.mime_type == "image/webp"


@pytest.mark.parametrize("image_bytes,expected", [
    (PNG_BYTES, "image/png"),
    (JPEG_BYTES, "image/jpeg"),
    (WEBP_BYTES, "image/webp"),
    (b"not an image header", "image/jpeg"),
])
def test_bare_base64_is_sniffed(image_bytes, expected):
    assert detect_mime_type(image_bytes) == expected
    assert normalize_photo(base64.b64encode(image_bytes).decode()).mime_type == expected


def test_annotations_are_kept_in_order():
    photo = normalize_photo({
        "data": JPEG_B64,
        "annotations": [{"x": 10.4, "y": 20.6, "label": "crack"}, {"x": 1, "y": 2}],
    })

    assert [(a.x, a.y, a.label) for a in photo.annotations] == [(10.4, 20.6, "crack"), (1.0, 2.0, None)]


@pytest.mark.parametrize("payload", [
    f"data:image/gif;base64,{PNG_B64}",
    {"data": PNG_B64, "mimeType": "application/pdf"},
])
def test_unsupported_mime_type_is_rejected(payload):
    with pytest.raises(UnsupportedMediaType) as exc_info:
        normalize_photo(payload, index=2)

    assert exc_info.value.error_type == ErrorType.UNSUPPORTED_MEDIA_TYPE
    assert "Photo 3" in exc_info.value.context.message


@pytest.mark.parametrize("image_bytes,expected", [
    (b"GIF89a\x01\x00\x01\x00\x80\x00\x00", "image/gif"),
    (b"BM\x36\x00\x00\x00\x00\x00", "image/bmp"),
    (b"II*\x00\x08\x00\x00\x00", "image/tiff"),
    (b"MM\x00*\x00\x00\x00\x08", "image/tiff"),
    (b"%PDF-1.7\n", "application/pdf"),
])
def test_bare_base64_in_unaccepted_format_is_rejected(image_bytes, expected):
    assert detect_mime_type(image_bytes) == expected

    with pytest.raises(UnsupportedMediaType) as exc_info:
        normalize_photo(base64.b64encode(image_bytes).decode())

    assert exc_info.value.error_type == ErrorType.UNSUPPORTED_MEDIA_TYPE
    assert expected in exc_info.value.context.message


@pytest.mark.parametrize("payload", [
    "data:image/png;base64",
    "data:image/png;base64,",
    {"mimeType": "image/png"},
    {"data": 42},
    12345,
    "###not-base64###",
    {"data": JPEG_B64, "annotations": [{"x": "left"}]},
])
def test_malformed_payload_is_rejected(payload):
    with pytest.raises(MalformedInput) as exc_info:
        normalize_photo(payload)

    assert exc_info.value.error_type == ErrorType.MALFORMED_INPUT


@pytest.mark.parametrize("count", [0, 6])
def test_photo_count_out_of_range(count):
    with pytest.raises(ValidationError):
        normalize_photos([JPEG_B64] * count, max_photos=5)
