"""
Signer
======
RSA PKCS#1 v1.5 signatures over canonical strings.
"""

import base64
from enum import Enum
from typing import Any, Union

import structlog
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa, utils

from .canonical import canonicalize
from .exceptions import SigningError
from .models import PrivateKeyHolder, SignablePayload, SigningContext

logger = structlog.get_logger(__name__)

# Value of the ``algorithm`` field in the Signature header
SIGNATURE_ALGORITHM = "RSA256"


class DigestAlgorithm(str, Enum):
    """Digest algorithms usable with PKCS#1 v1.5 signatures."""
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        return {
            DigestAlgorithm.SHA256: hashes.SHA256,
            DigestAlgorithm.SHA384: hashes.SHA384,
            DigestAlgorithm.SHA512: hashes.SHA512,
        }[self]()


def compute_digest(content: str, digest: DigestAlgorithm = DigestAlgorithm.SHA256) -> bytes:
    """Digest the UTF-8 bytes of ``content``."""
    hasher = hashes.Hash(digest.hash_algorithm())
    hasher.update(content.encode("utf-8"))
    return hasher.finalize()


def _resolve_private_key(key: Union[rsa.RSAPrivateKey, PrivateKeyHolder, Any]) -> rsa.RSAPrivateKey:
    if isinstance(key, PrivateKeyHolder):
        key = key.get_private_key()
    if key is None:
        raise SigningError("No private key configured")
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError(f"Expected an RSA private key, got {type(key).__name__}")
    return key


def sign_content(
    content: str,
    key: Union[rsa.RSAPrivateKey, PrivateKeyHolder],
    digest: DigestAlgorithm = DigestAlgorithm.SHA256,
) -> str:
    """
    Sign a canonical string.
    
    The digest is computed first and then signed as a prehashed value, so the
    PKCS#1 v1.5 DigestInfo always carries the same algorithm that produced it.
    
    Args:
        content: Canonical string
        key: RSA private key or an object holding one
        digest: Digest algorithm (SHA-256 for the current protocol)
        
    Returns:
        Base64 signature (standard alphabet, padded)
        
    Raises:
        SigningError: If the key is unusable or rejects the digest
    """
    private_key = _resolve_private_key(key)
    hashed = compute_digest(content, digest)
    try:
        signature = private_key.sign(
            hashed,
            padding.PKCS1v15(),
            utils.Prehashed(digest.hash_algorithm()),
        )
    except ValueError as e:
        logger.error("Signing rejected by key", digest=digest.value, key_size=private_key.key_size)
        raise SigningError(f"Signing failed: {e}") from e
    return base64.b64encode(signature).decode("ascii")


def sign_request(
    context: SigningContext,
    payload: SignablePayload,
    key: Union[rsa.RSAPrivateKey, PrivateKeyHolder],
    digest: DigestAlgorithm = DigestAlgorithm.SHA256,
) -> str:
    """Canonicalize ``payload`` under ``context`` and sign it."""
    return sign_content(canonicalize(context, payload), key, digest)
