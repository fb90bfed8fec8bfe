"""Base64 helpers for GitHub payloads.

The contents API returns file bodies base64-encoded with a newline every
60 characters, and expects base64 (without newlines) on upload.
"""

import base64


def encode_base64(data: bytes) -> str:
    """Encode bytes as a single-line base64 string."""
    return base64.b64encode(data).decode("ascii")


def decode_base64(content: str) -> bytes:
    """Decode a base64 string, ignoring embedded whitespace and newlines.

    Raises:
        ValueError: If the content is not valid base64
    """
    compact = "".join(content.split())
    return base64.b64decode(compact, validate=True)
