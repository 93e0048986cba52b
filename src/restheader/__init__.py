"""
restheader: fluent builder for outgoing REST request headers.

Assembles content negotiation, authentication, caching, request signing and
optimistic-concurrency headers into a plain dict ready to hand to an HTTP
client.
"""

from restheader.common.signing import Signature, create_signature, verify_signature
from restheader.header import RESTHeader

__version__ = "1.0.0"

__all__ = [
    "RESTHeader",
    "Signature",
    "create_signature",
    "verify_signature",
]
