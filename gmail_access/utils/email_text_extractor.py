"""
Email text extraction utilities.

This module walks Gmail message part trees and decodes their base64url
payloads into text. It also converts HTML bodies to readable plain text
for multipart/alternative composition.
"""

import base64
import binascii
import re
from html.parser import HTMLParser
from typing import Any, Iterator, Optional

NO_BODY = "(no body)"
DECODE_ERROR = "(error decoding body)"

# Search order for the body text
PREFERRED_MIME_TYPES = ("text/plain", "text/html")


def decode_base64url(data: str) -> str:
    """
    Decode a Gmail base64url payload to UTF-8 text.

    Gmail omits '=' padding, so it is restored before decoding. Decoding is
    best effort: any failure yields DECODE_ERROR instead of raising.

    Example:
        >>> decode_base64url("aGVsbG8")
        'hello'
    """
    standard = data.replace("-", "+").replace("_", "/")
    standard += "=" * (-len(standard) % 4)
    try:
        return base64.b64decode(standard).decode("utf-8")
    except (binascii.Error, ValueError):
        return DECODE_ERROR


def iter_parts(payload: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """
    Yield every part of a payload tree in depth-first, left-to-right preorder.

    Uses an explicit stack so deeply nested multiparts cannot exhaust the
    interpreter's recursion limit.
    """
    stack = [payload]
    while stack:
        part = stack.pop()
        yield part
        children = part.get("parts") or []
        stack.extend(reversed(children))


def find_part_text(payload: dict[str, Any], mime_type: str) -> str:
    """Return the first non-empty decoded body of the given MIME type, or ''."""
    for part in iter_parts(payload):
        if part.get("mimeType") != mime_type:
            continue
        data = (part.get("body") or {}).get("data")
        if not data:
            continue
        text = decode_base64url(data)
        if text:
            return text
    return ""


def extract_body(payload: Optional[dict[str, Any]]) -> str:
    """
    Extract the message body text from a Gmail payload.

    Preference order:
    1. First text/plain part with content
    2. First text/html part with content
    3. The root part's own inline data

    Args:
        payload: The "payload" object of a Gmail message (format=full)

    Returns:
        Decoded body text, or NO_BODY when nothing yields content
    """
    if not payload:
        return NO_BODY

    for mime_type in PREFERRED_MIME_TYPES:
        text = find_part_text(payload, mime_type)
        if text:
            return text

    data = (payload.get("body") or {}).get("data")
    if data:
        text = decode_base64url(data)
        if text:
            return text

    return NO_BODY


class HTMLTextExtractor(HTMLParser):
    """
    Extract plain text from HTML email bodies.

    This parser strips HTML tags while preserving readable content.
    Block-level tags like <p>, <div>, <br> are converted to newlines.

    Example:
        >>> extractor = HTMLTextExtractor()
        >>> extractor.feed('<p>Hello <strong>World</strong></p>')
        >>> extractor.get_text()
        'Hello World'
    """

    BLOCK_TAGS = {
        'p', 'div', 'br', 'tr', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
        'li', 'blockquote', 'pre', 'hr', 'table'
    }
    SKIP_TAGS = {'script', 'style', 'head', 'title', 'meta', 'link'}

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.text_parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        tag = tag.lower()
        if tag in self.SKIP_TAGS:
            self._skip_depth += 1
        elif tag in self.BLOCK_TAGS:
            self._newline()

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag in self.SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in self.BLOCK_TAGS:
            self._newline()

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        stripped = data.strip()
        if stripped:
            self.text_parts.append(stripped)
            self.text_parts.append(' ')

    def _newline(self) -> None:
        if self.text_parts and self.text_parts[-1] != '\n':
            self.text_parts.append('\n')

    def get_text(self) -> str:
        """
        Get the extracted plain text.

        Returns:
            Extracted and cleaned plain text
        """
        text = ''.join(self.text_parts)
        # Clean up multiple spaces and newlines
        text = re.sub(r' +', ' ', text)
        text = re.sub(r' *\n *', '\n', text)
        text = re.sub(r'\n{3,}', '\n\n', text)
        return text.strip()


def html_to_text(html: str) -> str:
    """Convert an HTML body to plain text."""
    extractor = HTMLTextExtractor()
    extractor.feed(html)
    extractor.close()
    return extractor.get_text()
