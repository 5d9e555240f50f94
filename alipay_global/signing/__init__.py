"""
Signing Module
==============
Canonical request strings, RSA signing and verification for the
Alipay Global API.
"""

from .models import (
    HttpMethod,
    InboundSignature,
    PrivateKeyHolder,
    PublicKeyHolder,
    Signable,
    SignatureHeader,
    SigningContext,
    format_timestamp,
)
from .exceptions import (
    SignatureProtocolError,
    SigningError,
    VerificationError,
    VerificationStage,
)
from .canonical import (
    CANONICAL_FORM_VERSION,
    build_canonical_request,
    canonicalize,
    serialize_payload,
)
from .signer import (
    SIGNATURE_ALGORITHM,
    DigestAlgorithm,
    compute_digest,
    sign_content,
    sign_request,
)
from .verifier import verify_content, verify_request
from .headers import (
    CLIENT_ID_HEADER,
    DEFAULT_KEY_VERSION,
    REQUEST_TIME_HEADER,
    RESPONSE_TIME_HEADER,
    SIGNATURE_HEADER,
    create_response_headers,
    create_signed_headers,
    decode_signature,
    format_signature_header,
    parse_signature_header,
    read_signed_headers,
)

__all__ = [
    # Models
    "HttpMethod",
    "InboundSignature",
    "PrivateKeyHolder",
    "PublicKeyHolder",
    "Signable",
    "SignatureHeader",
    "SigningContext",
    "format_timestamp",
    # Exceptions
    "SignatureProtocolError",
    "SigningError",
    "VerificationError",
    "VerificationStage",
    # Canonical form
    "CANONICAL_FORM_VERSION",
    "build_canonical_request",
    "canonicalize",
    "serialize_payload",
    # Signer
    "SIGNATURE_ALGORITHM",
    "DigestAlgorithm",
    "compute_digest",
    "sign_content",
    "sign_request",
    # Verifier
    "verify_content",
    "verify_request",
    # Headers
    "CLIENT_ID_HEADER",
    "DEFAULT_KEY_VERSION",
    "REQUEST_TIME_HEADER",
    "RESPONSE_TIME_HEADER",
    "SIGNATURE_HEADER",
    "create_response_headers",
    "create_signed_headers",
    "decode_signature",
    "format_signature_header",
    "parse_signature_header",
    "read_signed_headers",
]
