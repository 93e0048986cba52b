"""HMAC-SHA256 request signatures carried in the api-signature header."""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from restheader.common.encoding import b64encode_text
from restheader.common.errors import SignatureError, SignatureFormatError
from restheader.common.logging import get_logger

logger = get_logger(__name__)

ALGORITHM = "HmacSHA256"
SIGNED_HEADERS = "SignedDate"
KEY_PREFIX = "AWS"

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class Signature:
    """A signature header together with the date it signs."""

    sig_header: str
    signed_date: str


@dataclass(frozen=True)
class SignatureParts:
    """Fields of a parsed api-signature header."""

    algorithm: str
    credential: str
    signed_headers: str
    signature: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_signed_date(moment: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds, e.g. 2024-03-05T14:07:09.123Z."""
    moment = _as_utc(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_signed_date(value: str) -> datetime:
    """Parse a signed date back into an aware UTC datetime."""
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as e:
        raise SignatureFormatError(f"Invalid signed date: {value!r}", value) from e
    return _as_utc(moment)


def compute_signature(secret_key: str, signed_date: str) -> str:
    """
    Compute the Base64 HMAC-SHA256 signature of a signed date.

    The HMAC key is the UTF-8 of ``"AWS" + secret_key``. The message is the
    Base64 text of the signed date, not the date itself.

    Raises:
        SignatureError: If the key or date cannot be UTF-8 encoded
    """
    try:
        key = f"{KEY_PREFIX}{secret_key}".encode("utf-8")
        message = b64encode_text(signed_date).encode("ascii")
    except UnicodeEncodeError as e:
        raise SignatureError(f"Cannot encode signing input: {e.reason}") from e

    digest = hmac.new(key, message, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def format_signature_header(shared_key: str, signature: str) -> str:
    """Build the api-signature header value."""
    return (
        f"{ALGORITHM};Credential:{shared_key};"
        f"SignedHeaders:{SIGNED_HEADERS};Signature:{signature}"
    )


def parse_signature_header(value: str) -> SignatureParts:
    """
    Split an api-signature header into its fields.

    Args:
        value: Header value, e.g. ``HmacSHA256;Credential:k;SignedHeaders:SignedDate;Signature:abc=``

    Returns:
        Parsed SignatureParts

    Raises:
        SignatureFormatError: If the header does not have the expected shape
    """
    segments = value.split(";")
    if len(segments) != 4:
        raise SignatureFormatError("Expected 4 ';'-separated segments", value)

    fields: dict[str, str] = {}
    for segment, name in zip(segments[1:], ("Credential", "SignedHeaders", "Signature")):
        key, sep, field_value = segment.partition(":")
        if not sep or key != name:
            raise SignatureFormatError(f"Expected '{name}:' segment", value)
        fields[name] = field_value

    return SignatureParts(
        algorithm=segments[0],
        credential=fields["Credential"],
        signed_headers=fields["SignedHeaders"],
        signature=fields["Signature"],
    )


def create_signature(
    shared_key: str,
    secret_key: str,
    clock: Clock | None = None,
) -> Signature:
    """
    Sign the current time for the api-signature/signedDate header pair.

    Args:
        shared_key: Public key placed in the Credential field
        secret_key: Private key used to derive the HMAC key
        clock: Optional time source; defaults to the system clock (UTC)

    Returns:
        Signature with the header value and the signed date
    """
    signed_date = format_signed_date((clock or _utcnow)())
    signature = compute_signature(secret_key, signed_date)
    logger.debug("Signature created", credential=shared_key, signed_date=signed_date)
    return Signature(
        sig_header=format_signature_header(shared_key, signature),
        signed_date=signed_date,
    )


def verify_signature(
    sig_header: str,
    signed_date: str,
    secret_key: str,
    *,
    max_age: float | None = None,
    clock: Clock | None = None,
) -> bool:
    """
    Verify an api-signature header against its signed date in constant time.

    Args:
        sig_header: api-signature header value
        signed_date: signedDate header value
        secret_key: Private key shared with the signer
        max_age: Optional max distance in seconds between signed date and now
        clock: Optional time source used for the max_age check

    Returns:
        True if the signature is valid (and fresh, when max_age is given)
    """
    try:
        parts = parse_signature_header(sig_header)
        signed_at = parse_signed_date(signed_date)
    except SignatureFormatError as e:
        logger.warning("Malformed signature", error=e.message)
        return False

    if parts.algorithm != ALGORITHM or parts.signed_headers != SIGNED_HEADERS:
        logger.warning("Unsupported signature scheme", algorithm=parts.algorithm)
        return False

    if max_age is not None:
        age = abs((_as_utc((clock or _utcnow)()) - signed_at).total_seconds())
        if age > max_age:
            logger.warning("Signed date outside allowed window", age=age, max_age=max_age)
            return False

    expected = compute_signature(secret_key, signed_date)
    return hmac.compare_digest(
        expected.encode("ascii"),
        parts.signature.encode("utf-8", "surrogatepass"),
    )
