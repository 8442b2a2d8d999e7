"""Managed MCP client session for browser automation."""

from .content import extract_image, extract_text
from .session import BrowserSession, SessionStateError

__all__ = ["BrowserSession", "SessionStateError", "extract_image", "extract_text"]
