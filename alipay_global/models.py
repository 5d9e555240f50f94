"""
API Models
==========
Request and response shapes for the Alipay Global payment API.

Field declaration order is the wire order: request bodies are serialized
once with ``to_signable()`` and those exact bytes are both signed and sent.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class AlipayModel(BaseModel):
    """Base model using the API's camelCase field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignableModel(AlipayModel):
    """Request body that can be signed."""

    def to_signable(self) -> str:
        """Compact JSON in declaration order, ``None`` fields omitted."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class TerminalType(str, Enum):
    WEB = "WEB"
    WAP = "WAP"
    APP = "APP"
    MINI_APP = "MINI_APP"


class ResultStatus(str, Enum):
    """S: success, F: failure, U: unknown (see the API result process logic)."""
    SUCCESS = "S"
    FAILURE = "F"
    UNKNOWN = "U"


class Amount(AlipayModel):
    """Amount in the smallest currency unit (100 = USD 1.00)."""
    currency: str = Field(min_length=3, max_length=3)
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class Order(AlipayModel):
    order_amount: Amount
    order_description: str
    reference_order_id: str


class PaymentMethod(AlipayModel):
    payment_method_type: str


class SettlementStrategy(AlipayModel):
    settlement_currency: str


class Env(AlipayModel):
    terminal_type: TerminalType = TerminalType.WEB


class CashierPayment(BaseModel):
    """Minimum information needed to start a cashier payment."""
    payment_request_id: str = Field(max_length=64)
    currency: str
    amount: int = Field(gt=0)
    redirect_url: str
    notify_url: str
    order_description: str
    reference_order_id: Optional[str] = None
    payment_method_type: str = "ALIPAY_CN"
    settlement_currency: Optional[str] = None
    terminal_type: TerminalType = TerminalType.WEB


class CashierPaymentRequest(SignableModel):
    """Wire body for ``/v1/payments/pay`` with ``productCode=CASHIER_PAYMENT``."""
    product_code: str = "CASHIER_PAYMENT"
    payment_request_id: str
    order: Order
    payment_amount: Amount
    payment_method: PaymentMethod
    payment_redirect_url: str
    payment_notify_url: str
    settlement_strategy: SettlementStrategy
    env: Env

    @classmethod
    def from_simple(cls, payment: CashierPayment) -> "CashierPaymentRequest":
        amount = Amount(currency=payment.currency, value=payment.amount)
        return cls(
            payment_request_id=payment.payment_request_id,
            order=Order(
                order_amount=amount,
                order_description=payment.order_description,
                reference_order_id=payment.reference_order_id or payment.payment_request_id,
            ),
            payment_amount=amount,
            payment_method=PaymentMethod(payment_method_type=payment.payment_method_type),
            payment_redirect_url=payment.redirect_url,
            payment_notify_url=payment.notify_url,
            settlement_strategy=SettlementStrategy(
                settlement_currency=payment.settlement_currency or payment.currency
            ),
            env=Env(terminal_type=payment.terminal_type),
        )


class RefundRequest(SignableModel):
    """Wire body for ``/v1/payments/refund``."""
    refund_request_id: str = Field(max_length=64)
    payment_id: str
    refund_amount: Amount
    reference_refund_id: Optional[str] = None
    refund_reason: Optional[str] = None


class InquiryRequest(SignableModel):
    """Wire body for ``/v1/payments/inquiryPayment``; one of the two ids is required."""
    payment_request_id: Optional[str] = None
    payment_id: Optional[str] = None

    @model_validator(mode="after")
    def _require_an_id(self):
        if not self.payment_request_id and not self.payment_id:
            raise ValueError("payment_request_id or payment_id is required")
        return self


class Result(AlipayModel):
    result_code: str
    result_status: ResultStatus
    result_message: Optional[str] = None


class AlipayResponse(AlipayModel):
    """Any API response; endpoint-specific fields are kept as extras."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    result: Result


class PaymentNotification(AlipayModel):
    """Body of a ``notifyPayment`` webhook."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    notify_type: str
    result: Result
    payment_request_id: str
    payment_id: Optional[str] = None
    payment_amount: Optional[Amount] = None
    payment_create_time: Optional[str] = None
    payment_time: Optional[str] = None


class WebhookAck(SignableModel):
    """Body returned to the provider to acknowledge a webhook."""
    result: Result
