"""
Header Functions
=================
Functions for creating and parsing the ``Signature`` header and its
companion client-id/time headers.
"""

import base64
import binascii
from typing import Dict, Mapping, Optional
from urllib.parse import quote, unquote

import structlog

from .exceptions import VerificationError, VerificationStage
from .models import InboundSignature, SignatureHeader, SigningContext
from .signer import SIGNATURE_ALGORITHM

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "Signature"
CLIENT_ID_HEADER = "Client-Id"
REQUEST_TIME_HEADER = "Request-Time"
RESPONSE_TIME_HEADER = "Response-Time"

DEFAULT_KEY_VERSION = "1"


def format_signature_header(signature: str, key_version: str = DEFAULT_KEY_VERSION) -> str:
    """
    Format a base64 signature into a ``Signature`` header value.
    
    Args:
        signature: Base64 signature as returned by ``sign_content``
        key_version: Version of the key pair registered with the provider
        
    Returns:
        ``algorithm=RSA256,keyVersion=<v>,signature=<urlencoded>``
    """
    return (
        f"algorithm={SIGNATURE_ALGORITHM},"
        f"keyVersion={key_version},"
        f"signature={quote(signature, safe='')}"
    )


def parse_signature_header(value: Optional[str]) -> SignatureHeader:
    """
    Parse a ``Signature`` header value.
    
    The ``signature`` field is URL-decoded but left as base64 text.
    
    Raises:
        VerificationError: (stage ``header``) if the header is empty, has no
            ``signature`` field, or names an unsupported algorithm
    """
    if not value or not value.strip():
        raise VerificationError(VerificationStage.HEADER, "Signature header is empty")

    fields: Dict[str, str] = {}
    for part in value.split(","):
        name, sep, field_value = part.partition("=")
        if not sep:
            continue
        fields[name.strip()] = field_value.strip()

    raw_signature = fields.get("signature")
    if not raw_signature:
        raise VerificationError(VerificationStage.HEADER, "Signature header has no signature field")

    algorithm = fields.get("algorithm")
    if algorithm is not None and algorithm != SIGNATURE_ALGORITHM:
        raise VerificationError(
            VerificationStage.HEADER, f"Unsupported signature algorithm: {algorithm}"
        )

    return SignatureHeader(
        signature=unquote(raw_signature),
        algorithm=algorithm,
        key_version=fields.get("keyVersion"),
    )


def decode_signature(signature: str) -> bytes:
    """
    Base64-decode a signature, tolerating stripped ``=`` padding.
    
    Raises:
        VerificationError: (stage ``decode``) on invalid base64
    """
    padded = signature + "=" * (-len(signature) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise VerificationError(VerificationStage.DECODE, "Signature is not valid base64", e) from e


def create_signed_headers(
    context: SigningContext,
    signature: str,
    key_version: str = DEFAULT_KEY_VERSION,
) -> Dict[str, str]:
    """
    Create headers for a signed outbound request.
    
    Args:
        context: Context the signature was computed under
        signature: Base64 signature
        key_version: Key version registered with the provider
        
    Returns:
        Dictionary of headers to include in request
    """
    return {
        "Content-Type": "application/json; charset=UTF-8",
        SIGNATURE_HEADER: format_signature_header(signature, key_version),
        "client-id": context.counterparty_id,
        REQUEST_TIME_HEADER: context.timestamp,
    }


def create_response_headers(
    context: SigningContext,
    signature: str,
    key_version: str = DEFAULT_KEY_VERSION,
) -> Dict[str, str]:
    """Create headers for a signed reply to an inbound webhook."""
    return {
        "Content-Type": "application/json; charset=UTF-8",
        SIGNATURE_HEADER: format_signature_header(signature, key_version),
        CLIENT_ID_HEADER: context.counterparty_id,
        RESPONSE_TIME_HEADER: context.timestamp,
    }


def _lookup(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def read_signed_headers(
    headers: Mapping[str, str],
    time_header: str = RESPONSE_TIME_HEADER,
) -> InboundSignature:
    """
    Read signature metadata from inbound headers (case-insensitive).
    
    Args:
        headers: Response or webhook request headers
        time_header: ``Response-Time`` for responses, ``Request-Time`` for webhooks
        
    Raises:
        VerificationError: (stage ``header``) if a required header is missing
    """
    values = {}
    for name in (SIGNATURE_HEADER, CLIENT_ID_HEADER, time_header):
        value = _lookup(headers, name)
        if not value:
            logger.warning("Missing signed header", header=name)
            raise VerificationError(VerificationStage.HEADER, f"Missing {name} header")
        values[name] = value

    return InboundSignature(
        client_id=values[CLIENT_ID_HEADER],
        timestamp=values[time_header],
        signature=values[SIGNATURE_HEADER],
    )
