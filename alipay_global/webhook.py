"""
Webhooks
========
Verification of payment notifications and signed acknowledgements.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Union

import structlog
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import Response

from .errors import ProtocolAmbiguousError, ResponseVerificationError
from .keys import KeyMaterial
from .models import PaymentNotification, Result, ResultStatus, WebhookAck
from .signing import (
    REQUEST_TIME_HEADER,
    HttpMethod,
    SigningContext,
    VerificationError,
    VerificationStage,
    create_response_headers,
    read_signed_headers,
    sign_request,
    verify_request,
)

logger = structlog.get_logger(__name__)

PARAM_ILLEGAL_MESSAGE = (
    "The required parameters are not passed, or illegal parameters exist. "
    "For example, a non-numeric input, an invalid date, or the length and "
    "type of the parameter are wrong."
)


@dataclass(frozen=True)
class WebhookData:
    """Everything needed to verify an inbound notification."""
    method: str
    path: str
    client_id: str
    request_time: str
    signature: str
    body: str

    @classmethod
    def from_headers(
        cls,
        method: str,
        path: str,
        headers: Mapping[str, str],
        body: Union[str, bytes],
    ) -> "WebhookData":
        """
        Build from raw request parts.
        
        Raises:
            ResponseVerificationError: if signature headers are missing or the
                body is not UTF-8
        """
        try:
            inbound = read_signed_headers(headers, REQUEST_TIME_HEADER)
        except VerificationError as e:
            raise ResponseVerificationError("Webhook verification failed", e) from e

        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as e:
                cause = VerificationError(VerificationStage.DECODE, "Webhook body is not UTF-8", e)
                raise ResponseVerificationError("Webhook verification failed", cause) from e

        return cls(
            method=method.upper(),
            path=path,
            client_id=inbound.client_id,
            request_time=inbound.timestamp,
            signature=inbound.signature,
            body=body,
        )

    @classmethod
    async def from_request(cls, request: Request) -> "WebhookData":
        """Build from a Starlette request, reading the raw body."""
        body = await request.body()
        return cls.from_headers(request.method, request.url.path, request.headers, body)


@dataclass(frozen=True)
class WebhookResponse:
    """Signed acknowledgement to return to the provider."""
    headers: Dict[str, str]
    body: str

    def to_response(self) -> Response:
        return Response(content=self.body, status_code=200, headers=self.headers)


def verify_notification(keys: KeyMaterial, data: WebhookData) -> PaymentNotification:
    """
    Verify a notification and parse its body.
    
    The signature is checked over the raw body before anything is parsed;
    an unverified notification is never returned.
    
    Raises:
        ResponseVerificationError: signature rejected
        ProtocolAmbiguousError: verified body is not a payment notification
    """
    try:
        try:
            method = HttpMethod(data.method)
        except ValueError as e:
            raise VerificationError(VerificationStage.HEADER, f"Unsupported method {data.method}", e) from e
        context = SigningContext(
            http_method=method,
            path=data.path,
            counterparty_id=data.client_id,
            timestamp=data.request_time,
        )
        verify_request(context, data.body, data.signature, keys)
    except VerificationError as e:
        logger.warning("Webhook verification failed", path=data.path, stage=e.stage.value)
        raise ResponseVerificationError("Webhook verification failed", e) from e

    try:
        notification = PaymentNotification.model_validate_json(data.body)
    except ValidationError as e:
        raise ProtocolAmbiguousError("Failed to parse notification body", details=str(e)) from e

    logger.info(
        "Webhook verified",
        notify_type=notification.notify_type,
        payment_request_id=notification.payment_request_id,
    )
    return notification


def _signed_ack(
    keys: KeyMaterial,
    result: Result,
    client_id: str,
    path: str,
    method: str,
) -> WebhookResponse:
    ack = WebhookAck(result=result)
    body = ack.to_signable()
    context = SigningContext.now(method, path, client_id)
    signature = sign_request(context, body, keys)
    return WebhookResponse(
        headers=create_response_headers(context, signature, keys.key_version),
        body=body,
    )


def success_response(
    keys: KeyMaterial,
    client_id: str,
    path: str,
    method: str = "POST",
) -> WebhookResponse:
    """Signed acknowledgement telling the provider the notification was accepted."""
    result = Result(
        result_code="SUCCESS",
        result_status=ResultStatus.SUCCESS,
        result_message="success",
    )
    return _signed_ack(keys, result, client_id, path, method)


def failed_response(
    keys: KeyMaterial,
    client_id: str,
    path: str,
    method: str = "POST",
    message: str = PARAM_ILLEGAL_MESSAGE,
) -> WebhookResponse:
    """Signed rejection; the provider will redeliver the notification."""
    result = Result(
        result_code="PARAM_ILLEGAL",
        result_status=ResultStatus.FAILURE,
        result_message=message,
    )
    return _signed_ack(keys, result, client_id, path, method)
