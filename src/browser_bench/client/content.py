"""Pull typed items out of MCP tool results."""

from __future__ import annotations

from typing import Any

from browser_bench.images import ExtractedImage, ImageMimeType, is_valid_mime_type


def get_field(item: Any, name: str) -> Any:
    # Tool results arrive as MCP SDK models or, from agent SDKs, plain dicts
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def image_mime_type(item: Any) -> Any:
    # Newer SDK models expose ``mime_type``; wire JSON keeps ``mimeType``
    return get_field(item, "mime_type") or get_field(item, "mimeType")


def content_items(result: Any) -> list[Any]:
    content = get_field(result, "content")
    if not content or isinstance(content, str):
        return []
    return list(content)


def extract_text(result: Any) -> str | None:
    """Text of the first text item, or None."""
    for item in content_items(result):
        if get_field(item, "type") == "text":
            return get_field(item, "text")
    return None


def extract_image(result: Any) -> ExtractedImage | None:
    """First image item, if it carries data and a supported MIME type."""
    for item in content_items(result):
        if get_field(item, "type") != "image":
            continue
        data = get_field(item, "data")
        mime_type = image_mime_type(item)
        if not data or not is_valid_mime_type(mime_type):
            return None
        return ExtractedImage(data=data, mime_type=ImageMimeType(mime_type))
    return None
