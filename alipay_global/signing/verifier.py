"""
Verifier
========
Verification of RSA signatures carried on inbound responses and webhooks.
"""

from typing import Any, Union

import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding, rsa, utils

from .canonical import canonicalize
from .exceptions import VerificationError, VerificationStage
from .headers import decode_signature, parse_signature_header
from .models import PublicKeyHolder, SigningContext
from .signer import DigestAlgorithm, compute_digest

logger = structlog.get_logger(__name__)


def _resolve_public_key(key: Union[rsa.RSAPublicKey, PublicKeyHolder, Any]) -> rsa.RSAPublicKey:
    if isinstance(key, PublicKeyHolder):
        key = key.get_public_key()
    if key is None:
        raise VerificationError(VerificationStage.KEY, "No counterparty public key configured")
    if not isinstance(key, rsa.RSAPublicKey):
        raise VerificationError(
            VerificationStage.KEY, f"Expected an RSA public key, got {type(key).__name__}"
        )
    return key


def verify_content(
    content: str,
    signature_header: str,
    key: Union[rsa.RSAPublicKey, PublicKeyHolder],
    digest: DigestAlgorithm = DigestAlgorithm.SHA256,
) -> None:
    """
    Verify a ``Signature`` header against a canonical string.
    
    Args:
        content: Canonical string rebuilt from the inbound message
        signature_header: Raw ``Signature`` header value
        key: Counterparty RSA public key or an object holding one
        digest: Digest algorithm (SHA-256 for the current protocol)
        
    Raises:
        VerificationError: naming the stage that failed
    """
    public_key = _resolve_public_key(key)
    header = parse_signature_header(signature_header)
    signature = decode_signature(header.signature)

    try:
        public_key.verify(
            signature,
            compute_digest(content, digest),
            padding.PKCS1v15(),
            utils.Prehashed(digest.hash_algorithm()),
        )
    except InvalidSignature as e:
        logger.warning("Signature mismatch", key_version=header.key_version)
        raise VerificationError(VerificationStage.SIGNATURE, "Signature does not match", e) from e


def verify_request(
    context: SigningContext,
    body: str,
    signature_header: str,
    key: Union[rsa.RSAPublicKey, PublicKeyHolder],
    digest: DigestAlgorithm = DigestAlgorithm.SHA256,
) -> None:
    """
    Verify an inbound message.
    
    ``body`` must be the raw text received; re-serializing a parsed body
    changes its bytes and breaks the signature.
    """
    verify_content(canonicalize(context, body), signature_header, key, digest)
