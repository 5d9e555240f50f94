from typing import Any, Optional

from .signing.exceptions import VerificationError


class AlipayError(Exception):
    """Base exception for all Alipay API call failures."""
    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(f"[alipay] {message} (Status: {status_code})")

class TransportError(AlipayError):
    """Raised when the API is unreachable, times out, or returns a non-2xx status."""
    pass

class ResponseVerificationError(AlipayError):
    """Raised when a response or webhook signature is rejected. The payload must not be used."""
    def __init__(self, message: str, cause: VerificationError, status_code: Optional[int] = None):
        self.cause = cause
        self.stage = cause.stage
        super().__init__(message, status_code=status_code, details=cause.stage.value)

class PaymentFailedError(AlipayError):
    """Raised when the API reports a definite failure (result status F)."""
    def __init__(self, message: str, result_code: Optional[str] = None, **kwargs):
        self.result_code = result_code
        super().__init__(message, **kwargs)

class ProtocolAmbiguousError(AlipayError):
    """Raised when the outcome is unknown (result status U or unreadable body)."""
    def __init__(self, message: str, result_code: Optional[str] = None, **kwargs):
        self.result_code = result_code
        super().__init__(message, **kwargs)
