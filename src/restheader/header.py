"""Fluent builder for REST request headers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from restheader.common.encoding import b64encode_text
from restheader.common.logging import get_logger
from restheader.common.signing import Clock, create_signature

logger = get_logger(__name__)

JSON = "application/json"
SCIM_JSON = "application/scim+json"
FORM_URLENCODED = "application/x-www-form-urlencoded"
NO_CACHE = "no-store no-cache"

# Internal field -> header name. build() emits headers in this order.
HEADER_NAMES: dict[str, str] = {
    "cacheControl": "Cache-Control",
    "apiVersion": "api-version",
    "contentType": "Content-Type",
    "Accept": "Accept",
    "Authorization": "Authorization",
    "productKey": "x-product-key",
    "customHeader": "x-custom-header",
    "etag": "If-Match",
    "sigHeader": "api-signature",
    "signedDate": "signedDate",
}


def _credential(credentials: Any, name: str) -> Any:
    if isinstance(credentials, Mapping):
        return credentials.get(name)
    return getattr(credentials, name, None)


class RESTHeader:
    """
    Build a JSON REST header set.

    Every ``add_*`` method mutates the builder and returns it, so calls can
    be chained::

        headers = RESTHeader("1").add_bearer_auth(token).add_etag(etag).build()

    The following headers are always present::

        Cache-Control: no-store no-cache
        Content-Type: application/json
        Accept: application/json

    ``api-version`` is added when an api version is given.
    """

    def __init__(self, api_version: Any = None, *, clock: Clock | None = None) -> None:
        """
        Initialize the header set.

        Args:
            api_version: Value of the api-version header (omitted when None)
            clock: Time source used by add_signature; defaults to the system clock
        """
        self._clock = clock
        self._fields: dict[str, Any] = {"cacheControl": NO_CACHE}
        if api_version is not None:
            self._fields["apiVersion"] = api_version
        self.add_content_type()
        self.add_accept()

    def __repr__(self) -> str:
        return f"RESTHeader(fields={sorted(self._fields)})"

    # === Content negotiation ===

    def add_accept(self, accept_type: str = JSON) -> RESTHeader:
        """Set the Accept header."""
        self._fields["Accept"] = accept_type
        return self

    def add_accept_scim(self) -> RESTHeader:
        """Set Accept to application/scim+json."""
        return self.add_accept(SCIM_JSON)

    def add_content_type(self, content_type: str = JSON) -> RESTHeader:
        """Set the Content-Type header."""
        self._fields["contentType"] = content_type
        return self

    def add_form_content_type(self) -> RESTHeader:
        """Set Content-Type to application/x-www-form-urlencoded."""
        return self.add_content_type(FORM_URLENCODED)

    # === Authentication ===
    # Basic, bearer and plain auth share the Authorization header; the last call wins.

    def add_basic_auth(self, credentials: Mapping[str, Any] | Any) -> RESTHeader:
        """
        Set Authorization to ``Basic <base64(client_id:client_secret)>``.

        Args:
            credentials: Mapping or object with ``client_id`` and ``client_secret``.
                Missing values are rendered as ``None`` rather than rejected.
        """
        client_id = _credential(credentials, "client_id")
        client_secret = _credential(credentials, "client_secret")
        self._fields["Authorization"] = f"Basic {b64encode_text(f'{client_id}:{client_secret}')}"
        return self

    def add_bearer_auth(self, access_token: str) -> RESTHeader:
        """Set Authorization to ``Bearer <access_token>``."""
        self._fields["Authorization"] = f"Bearer {access_token}"
        return self

    def add_plain_auth(self, access_token: str) -> RESTHeader:
        """Set Authorization to the access token verbatim."""
        self._fields["Authorization"] = access_token
        return self

    # === Other headers ===

    def add_product_key(self, product_key: str) -> RESTHeader:
        """Set the x-product-key header."""
        self._fields["productKey"] = product_key
        return self

    def add_custom_header(self, value: str) -> RESTHeader:
        """Set the x-custom-header header."""
        self._fields["customHeader"] = value
        return self

    def add_etag(self, etag: str) -> RESTHeader:
        """Set the If-Match header for optimistic concurrency."""
        self._fields["etag"] = etag
        return self

    def add_signature(self, shared_key: str, secret_key: str) -> RESTHeader:
        """
        Sign the current time and add the api-signature and signedDate headers.

        api-signature has the form
        ``HmacSHA256;Credential:<shared_key>;SignedHeaders:SignedDate;Signature:<b64>``.

        Args:
            shared_key: Public key placed in the Credential field
            secret_key: Private key used to derive the HMAC key
        """
        signature = create_signature(shared_key, secret_key, clock=self._clock)
        self._fields["sigHeader"] = signature.sig_header
        self._fields["signedDate"] = signature.signed_date
        return self

    # === Finalize ===

    def build(self) -> dict[str, str]:
        """
        Build the header dict from the fields added so far.

        Each field is mapped to its header name; values are rendered as strings.
        A new dict is returned on every call.
        """
        headers: dict[str, str] = {}
        for field, header in HEADER_NAMES.items():
            if field in self._fields:
                headers[header] = str(self._fields[field])
        logger.debug("Headers built", headers=list(headers))
        return headers

    @staticmethod
    def bearer_auth_only(token: str) -> dict[str, str]:
        """Default headers plus a bearer Authorization header."""
        return RESTHeader().add_bearer_auth(token).build()

    @staticmethod
    def bearer_auth_with_api_version(api_version: Any, token: str) -> dict[str, str]:
        """Default headers plus api-version and a bearer Authorization header."""
        return RESTHeader(api_version).add_bearer_auth(token).build()

    @staticmethod
    def default_headers() -> dict[str, str]:
        """Only the default headers."""
        return RESTHeader().build()
