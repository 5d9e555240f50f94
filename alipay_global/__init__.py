"""
Alipay Global
=============
Signed client for the Alipay Global (AMS) payment API.
"""

__version__ = "0.3.0"

# Signing core
from alipay_global.signing import (
    CANONICAL_FORM_VERSION,
    DigestAlgorithm,
    HttpMethod,
    SigningContext,
    SigningError,
    VerificationError,
    VerificationStage,
    build_canonical_request,
    format_signature_header,
    format_timestamp,
    parse_signature_header,
    sign_content,
    sign_request,
    verify_content,
    verify_request,
)

# Keys and configuration
from alipay_global.keys import (
    KeyMaterial,
    load_private_key,
    load_private_key_file,
    load_public_key,
    load_public_key_file,
)
from alipay_global.config import AlipayAction, AlipayConfig

# Errors
from alipay_global.errors import (
    AlipayError,
    PaymentFailedError,
    ProtocolAmbiguousError,
    ResponseVerificationError,
    TransportError,
)

# Models
from alipay_global.models import (
    AlipayResponse,
    Amount,
    CashierPayment,
    CashierPaymentRequest,
    InquiryRequest,
    PaymentNotification,
    RefundRequest,
    Result,
    ResultStatus,
    TerminalType,
)

# Client
from alipay_global.client import AlipayClient
from alipay_global.response import parse_response

# Webhooks
from alipay_global.webhook import (
    WebhookData,
    WebhookResponse,
    failed_response,
    success_response,
    verify_notification,
)

# Logging
from alipay_global.log import setup_logging

__all__ = [
    # Signing core
    "CANONICAL_FORM_VERSION",
    "DigestAlgorithm",
    "HttpMethod",
    "SigningContext",
    "SigningError",
    "VerificationError",
    "VerificationStage",
    "build_canonical_request",
    "format_signature_header",
    "format_timestamp",
    "parse_signature_header",
    "sign_content",
    "sign_request",
    "verify_content",
    "verify_request",
    # Keys and configuration
    "KeyMaterial",
    "load_private_key",
    "load_private_key_file",
    "load_public_key",
    "load_public_key_file",
    "AlipayAction",
    "AlipayConfig",
    # Errors
    "AlipayError",
    "PaymentFailedError",
    "ProtocolAmbiguousError",
    "ResponseVerificationError",
    "TransportError",
    # Models
    "AlipayResponse",
    "Amount",
    "CashierPayment",
    "CashierPaymentRequest",
    "InquiryRequest",
    "PaymentNotification",
    "RefundRequest",
    "Result",
    "ResultStatus",
    "TerminalType",
    # Client
    "AlipayClient",
    "parse_response",
    # Webhooks
    "WebhookData",
    "WebhookResponse",
    "failed_response",
    "success_response",
    "verify_notification",
    # Logging
    "setup_logging",
]
