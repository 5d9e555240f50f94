"""
Key Loading
===========
Load RSA key material from PEM, DER or bare base64 DER.

Keys are loaded once and shared read-only between concurrent calls.
"""

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import structlog
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .signing.exceptions import SigningError, VerificationError, VerificationStage
from .signing.headers import DEFAULT_KEY_VERSION

logger = structlog.get_logger(__name__)

KeyData = Union[str, bytes]


def _to_der(data: bytes) -> bytes:
    """Decode bare base64 (as issued by the provider portal) to DER bytes."""
    compact = b"".join(data.split())
    return base64.b64decode(compact, validate=True)


def load_private_key(data: KeyData) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key.
    
    Supports:
    - PEM (PKCS#1 or PKCS#8) - begins with "-----BEGIN"
    - Raw DER bytes
    - Base64-encoded DER text
    
    Raises:
        SigningError: If the key cannot be parsed or is not RSA
    """
    raw = data.encode("utf-8") if isinstance(data, str) else data
    try:
        if b"-----BEGIN" in raw:
            key = serialization.load_pem_private_key(raw, password=None)
        else:
            try:
                key = serialization.load_der_private_key(raw, password=None)
            except ValueError:
                key = serialization.load_der_private_key(_to_der(raw), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.error("Private key could not be parsed", error_type=type(e).__name__)
        raise SigningError("Unable to load private key") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError(f"Private key must be RSA, got {type(key).__name__}")
    return key


def load_public_key(data: KeyData) -> rsa.RSAPublicKey:
    """
    Load an RSA public key (PEM, DER or base64 DER).
    
    Raises:
        VerificationError: (stage ``key``) if the key cannot be parsed or is not RSA
    """
    raw = data.encode("utf-8") if isinstance(data, str) else data
    try:
        if b"-----BEGIN" in raw:
            key = serialization.load_pem_public_key(raw)
        else:
            try:
                key = serialization.load_der_public_key(raw)
            except ValueError:
                key = serialization.load_der_public_key(_to_der(raw))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.error("Public key could not be parsed", error_type=type(e).__name__)
        raise VerificationError(VerificationStage.KEY, "Unable to load public key", e) from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise VerificationError(
            VerificationStage.KEY, f"Public key must be RSA, got {type(key).__name__}"
        )
    return key


def load_private_key_file(path: Union[str, Path]) -> rsa.RSAPrivateKey:
    """Load an RSA private key from a file."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise SigningError(f"Unable to read private key file {path}") from e
    return load_private_key(data)


def load_public_key_file(path: Union[str, Path]) -> rsa.RSAPublicKey:
    """Load an RSA public key from a file."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise VerificationError(VerificationStage.KEY, f"Unable to read public key file {path}", e) from e
    return load_public_key(data)


@dataclass(frozen=True)
class KeyMaterial:
    """Our private key and the counterparty public key, read-only after load."""
    private_key: Optional[rsa.RSAPrivateKey] = None
    public_key: Optional[rsa.RSAPublicKey] = None
    key_version: str = DEFAULT_KEY_VERSION

    def get_private_key(self) -> Optional[rsa.RSAPrivateKey]:
        return self.private_key

    def get_public_key(self) -> Optional[rsa.RSAPublicKey]:
        return self.public_key

    def __repr__(self) -> str:
        return (
            f"KeyMaterial(private_key={'<set>' if self.private_key else None}, "
            f"public_key={'<set>' if self.public_key else None}, "
            f"key_version={self.key_version!r})"
        )
