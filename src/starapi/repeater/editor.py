"""
Endpoint Text Formatting and Parsing

Renders a request descriptor as the plain-text block used by the copy action,
and parses such a block back into a descriptor.
"""

from typing import Optional

from ..core.exceptions import ValidationError
from ..core.models import RequestDescriptor


class EndpointFormatter:
    """Formatter for the copy-as-text representation."""

    @staticmethod
    def to_text(descriptor: RequestDescriptor) -> str:
        """
        Format a descriptor as ``"METHOD URL"`` plus the body on following lines.

        Args:
            descriptor: RequestDescriptor (or SavedEndpoint) to format

        Returns:
            Text block suitable for the clipboard
        """
        text = f"{descriptor.method} {descriptor.url}"
        if descriptor.body:
            text += "\n" + descriptor.body
        return text


class EndpointParser:
    """Parser for the copy-as-text representation."""

    @staticmethod
    def parse_text(text: str) -> RequestDescriptor:
        """
        Parse a copied text block into a RequestDescriptor.

        Args:
            text: Block produced by :meth:`EndpointFormatter.to_text`

        Returns:
            RequestDescriptor

        Raises:
            ValidationError: If the block has no request line or no URL
        """
        if not text or not text.strip():
            raise ValidationError("Empty endpoint text")

        request_line, _, rest = text.lstrip("\r\n").partition("\n")
        request_line = request_line.rstrip("\r")

        method, _, url = request_line.partition(" ")
        if not url.strip():
            raise ValidationError(f"Missing URL in request line: {request_line!r}")

        body: Optional[str] = rest if rest.strip() else None

        return RequestDescriptor(method=method, url=url, body=body)
