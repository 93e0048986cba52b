"""Common utilities for restheader."""

from restheader.common.encoding import b64encode_text
from restheader.common.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "b64encode_text",
]
