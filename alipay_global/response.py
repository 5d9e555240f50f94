"""
Response Parsing
================
Classify API results into success, failure, or unknown.
"""

from typing import Iterable

import structlog
from pydantic import ValidationError

from .errors import PaymentFailedError, ProtocolAmbiguousError
from .models import AlipayResponse, ResultStatus

logger = structlog.get_logger(__name__)


def parse_response(body: str, accept_codes: Iterable[str] = ()) -> AlipayResponse:
    """
    Parse a (verified) response body.
    
    Args:
        body: Raw response body
        accept_codes: Result codes that count as success even with status U
            (e.g. ``PAYMENT_IN_PROCESS`` for cashier payments, which returns
            the cashier URL while the user has not paid yet)
        
    Returns:
        Parsed response
        
    Raises:
        PaymentFailedError: result status F
        ProtocolAmbiguousError: result status U, or an unreadable body
    """
    try:
        parsed = AlipayResponse.model_validate_json(body)
    except ValidationError as e:
        logger.warning("Unreadable response body", errors=e.error_count())
        raise ProtocolAmbiguousError(
            "Failed to parse response body", details=str(e)
        ) from e

    result = parsed.result
    if result.result_status == ResultStatus.SUCCESS:
        return parsed
    if result.result_status == ResultStatus.FAILURE:
        raise PaymentFailedError(
            result.result_message or result.result_code,
            result_code=result.result_code,
            details=parsed.model_dump(by_alias=True),
        )
    if result.result_code in set(accept_codes):
        return parsed
    raise ProtocolAmbiguousError(
        result.result_message or result.result_code,
        result_code=result.result_code,
        details=parsed.model_dump(by_alias=True),
    )
