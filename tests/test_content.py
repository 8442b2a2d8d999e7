"""Tests for extracting text and images from tool results."""

from mcp.types import CallToolResult, ImageContent, TextContent

from browser_bench.client.content import extract_image, extract_text, image_mime_type
from browser_bench.images import ImageMimeType


def test_extract_text_from_sdk_result():
    result = CallToolResult(content=[TextContent(type="text", text="uid=1 button")])
    assert extract_text(result) == "uid=1 button"


def test_extract_text_missing():
    assert extract_text({"content": []}) is None
    assert extract_text({}) is None


def test_extract_image_from_sdk_result():
    result = CallToolResult(content=[
        TextContent(type="text", text="Took a screenshot"),
        ImageContent(type="image", data="aGVsbG8=", mimeType="image/png"),
    ])
    image = extract_image(result)
    assert image is not None
    assert image.mime_type is ImageMimeType.PNG
    assert image.data == "aGVsbG8="
    assert image.size_bytes == 5


def test_extract_image_from_validated_wire_json():
    # Same shape the server sends over stdio
    item = ImageContent.model_validate({"type": "image", "data": "aGVsbG8=", "mimeType": "image/jpeg"})
    assert image_mime_type(item) == "image/jpeg"
    image = extract_image(CallToolResult(content=[item]))
    assert image is not None
    assert image.mime_type is ImageMimeType.JPEG


def test_image_mime_type_field_spellings():
    assert image_mime_type({"mimeType": "image/png"}) == "image/png"
    assert image_mime_type({"mime_type": "image/gif"}) == "image/gif"
    assert image_mime_type({}) is None


def test_extract_image_rejects_unsupported_mime():
    result = {"content": [{"type": "image", "data": "aGVsbG8=", "mimeType": "image/bmp"}]}
    assert extract_image(result) is None


def test_extract_image_rejects_non_string_mime():
    assert extract_image({"content": [{"type": "image", "data": "AAAA", "mimeType": {"x": 1}}]}) is None
    assert extract_image({"content": [{"type": "image", "data": "AAAA", "mimeType": ["image/png"]}]}) is None


def test_extract_image_requires_data():
    assert extract_image({"content": [{"type": "image", "data": "", "mimeType": "image/png"}]}) is None
