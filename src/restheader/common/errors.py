"""Shared exception types."""

from __future__ import annotations


class RESTHeaderError(Exception):
    """Base error for restheader."""

    pass


class SignatureError(RESTHeaderError):
    """A signing primitive failed while building a signature."""

    pass


class SignatureFormatError(SignatureError):
    """An api-signature header or signed date could not be parsed."""

    def __init__(self, message: str, value: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.value = value
