"""Base64 helpers for text values."""

import base64


def b64encode_text(text: str) -> str:
    """
    Encode text to standard Base64.

    Args:
        text: Plain text to encode

    Returns:
        Base64 encoded string (with padding)
    """
    raw = text.encode("utf-8")
    return base64.b64encode(raw).decode("ascii")

