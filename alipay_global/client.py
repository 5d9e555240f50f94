"""
Alipay Client
=============
Async HTTP client that signs requests and verifies responses.
"""

from typing import Iterable, Optional, Union

import httpx
import structlog

from .config import AlipayAction, AlipayConfig
from .errors import (
    AlipayError,
    ProtocolAmbiguousError,
    ResponseVerificationError,
    TransportError,
)
from .keys import KeyMaterial
from .models import (
    AlipayResponse,
    CashierPayment,
    CashierPaymentRequest,
    InquiryRequest,
    RefundRequest,
    SignableModel,
)
from .response import parse_response
from .signing import (
    RESPONSE_TIME_HEADER,
    HttpMethod,
    SigningContext,
    VerificationError,
    VerificationStage,
    create_signed_headers,
    read_signed_headers,
    sign_request,
    verify_request,
)

logger = structlog.get_logger(__name__)

# Cashier payments answer U/PAYMENT_IN_PROCESS together with the cashier URL
CASHIER_ACCEPT_CODES = ("PAYMENT_IN_PROCESS",)


class AlipayClient:
    """
    Async client for the Alipay Global payment API.
    
    Features:
    - RSA-signed requests (Signature / client-id / Request-Time headers).
    - Signature verification of every response before it is parsed.
    - Connection pooling (via httpx.AsyncClient).
    - Standardized exception mapping.
    
    Each call makes exactly one attempt; retrying is up to the caller.
    """

    def __init__(
        self,
        config: Optional[AlipayConfig] = None,
        keys: Optional[KeyMaterial] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or AlipayConfig()
        self.keys = keys or self.config.load_keys()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self._get_client()
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.domain.rstrip("/"),
                timeout=self.config.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def aclose(self):
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _map_exception(self, exc: httpx.HTTPError) -> AlipayError:
        """Map httpx exceptions to client exceptions."""
        if isinstance(exc, httpx.TimeoutException):
            return TransportError("Request timed out")
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return TransportError(f"HTTP {status} Error", status_code=status, details=exc.response.text)
        return TransportError(f"Request transport error: {exc}")

    def _verify_response(self, path: str, response: httpx.Response, body: str) -> None:
        """
        Verify a response signature.
        
        Responses carry no path of their own, so the outbound request path is
        used; timestamp and client id come from the response headers.
        """
        try:
            inbound = read_signed_headers(response.headers, RESPONSE_TIME_HEADER)
            if inbound.client_id != self.config.client_id:
                raise VerificationError(
                    VerificationStage.HEADER,
                    f"Response Client-Id {inbound.client_id!r} does not match",
                )
            context = SigningContext(
                http_method=HttpMethod.POST,
                path=path,
                counterparty_id=inbound.client_id,
                timestamp=inbound.timestamp,
            )
            verify_request(context, body, inbound.signature, self.keys)
        except VerificationError as e:
            logger.warning("Response verification failed", path=path, stage=e.stage.value)
            raise ResponseVerificationError(
                "Response verification failed", e, status_code=response.status_code
            ) from e

    async def _post(
        self,
        action: AlipayAction,
        payload: SignableModel,
        accept_codes: Iterable[str] = (),
    ) -> AlipayResponse:
        """Sign, send, verify and parse a single API call."""
        path = self.config.path_for(action)
        body = payload.to_signable()
        context = SigningContext.now(HttpMethod.POST, path, self.config.client_id)
        signature = sign_request(context, body, self.keys)
        headers = create_signed_headers(context, signature, self.keys.key_version)

        client = await self._get_client()
        try:
            response = await client.post(path, content=body.encode("utf-8"), headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Alipay request failed", path=path, error=type(e).__name__)
            raise self._map_exception(e) from e

        try:
            response_body = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolAmbiguousError("Response body is not UTF-8", status_code=response.status_code) from e

        self._verify_response(path, response, response_body)

        logger.info("Alipay call completed", action=action.name, status_code=response.status_code)
        return parse_response(response_body, accept_codes)

    async def cashier_payment(
        self, payment: Union[CashierPayment, CashierPaymentRequest]
    ) -> AlipayResponse:
        """
        Create a cashier payment and return the response holding the cashier URL.
        
        See https://global.alipay.com/docs/ac/ams/payment_cashier
        """
        if isinstance(payment, CashierPayment):
            payment = CashierPaymentRequest.from_simple(payment)
        return await self._post(AlipayAction.PAY, payment, CASHIER_ACCEPT_CODES)

    async def refund(self, request: RefundRequest) -> AlipayResponse:
        """Refund all or part of a captured payment."""
        return await self._post(AlipayAction.REFUND, request)

    async def inquire_payment(self, request: InquiryRequest) -> AlipayResponse:
        """Query the status of a payment."""
        return await self._post(AlipayAction.INQUIRY, request)
