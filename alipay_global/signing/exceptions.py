"""
Signing Exceptions
==================
Typed failures raised by the signing and verification core.
"""

from enum import Enum
from typing import Optional


class VerificationStage(str, Enum):
    """Stage of verification at which a signature was rejected."""
    KEY = "key"
    HEADER = "header"
    DECODE = "decode"
    SIGNATURE = "signature"


class SignatureProtocolError(Exception):
    """Base exception for the signing core."""
    pass


class SigningError(SignatureProtocolError):
    """Raised when a signature cannot be produced (bad key, rejected digest)."""
    pass


class VerificationError(SignatureProtocolError):
    """Raised when an inbound signature is rejected."""

    def __init__(self, stage: VerificationStage, message: str, cause: Optional[Exception] = None):
        self.stage = stage
        self.message = message
        self.cause = cause
        super().__init__(f"[{stage.value}] {message}")
