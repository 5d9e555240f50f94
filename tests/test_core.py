"""
Unit Tests for alipay-global
============================
Tests for response parsing, models and logging.
"""

import json
import logging

import pytest
import structlog


class TestResponseParsing:
    """Tests for result classification."""

    def test_success(self):
        from alipay_global.response import parse_response

        body = '{"result":{"resultCode":"SUCCESS","resultStatus":"S","resultMessage":"Success"},"refundId":"r1"}'
        parsed = parse_response(body)

        assert parsed.result.result_code == "SUCCESS"
        assert parsed.model_extra["refundId"] == "r1"

    def test_failure(self):
        from alipay_global.errors import PaymentFailedError
        from alipay_global.response import parse_response

        body = '{"result":{"resultCode":"PARAM_ILLEGAL","resultStatus":"F","resultMessage":"bad"}}'
        with pytest.raises(PaymentFailedError) as exc_info:
            parse_response(body)

        assert exc_info.value.result_code == "PARAM_ILLEGAL"

    def test_unknown(self):
        from alipay_global.errors import ProtocolAmbiguousError
        from alipay_global.response import parse_response

        body = '{"result":{"resultCode":"PAYMENT_IN_PROCESS","resultStatus":"U"}}'
        with pytest.raises(ProtocolAmbiguousError):
            parse_response(body)

        assert parse_response(body, accept_codes=("PAYMENT_IN_PROCESS",)).result.result_status == "U"

    @pytest.mark.parametrize("body", ["not json", "{}", '{"result":{"resultStatus":"X"}}'])
    def test_unreadable(self, body):
        from alipay_global.errors import ProtocolAmbiguousError
        from alipay_global.response import parse_response

        with pytest.raises(ProtocolAmbiguousError):
            parse_response(body)


class TestModels:
    """Tests for request serialization."""

    def test_cashier_request_field_order(self):
        """Serialized field order must follow declaration order."""
        from alipay_global.models import CashierPayment, CashierPaymentRequest, TerminalType

        request = CashierPaymentRequest.from_simple(CashierPayment(
            payment_request_id="req-1",
            currency="USD",
            amount=250,
            redirect_url="https://merchant.example/return",
            notify_url="https://merchant.example/notify",
            order_description="Order",
            reference_order_id="order-9",
            settlement_currency="EUR",
            terminal_type=TerminalType.APP,
        ))
        signable = request.to_signable()

        assert list(json.loads(signable)) == [
            "productCode",
            "paymentRequestId",
            "order",
            "paymentAmount",
            "paymentMethod",
            "paymentRedirectUrl",
            "paymentNotifyUrl",
            "settlementStrategy",
            "env",
        ]
        assert " " not in signable.replace("https://merchant.example", "")
        assert json.loads(signable)["settlementStrategy"] == {"settlementCurrency": "EUR"}
        assert json.loads(signable)["env"] == {"terminalType": "APP"}

    def test_refund_omits_unset_fields(self):
        from alipay_global.models import Amount, RefundRequest

        request = RefundRequest(
            refund_request_id="refund-1",
            payment_id="pay-1",
            refund_amount=Amount(currency="USD", value="10"),
        )

        assert request.to_signable() == (
            '{"refundRequestId":"refund-1","paymentId":"pay-1",'
            '"refundAmount":{"currency":"USD","value":"10"}}'
        )

    def test_inquiry_requires_an_id(self):
        from pydantic import ValidationError
        from alipay_global.models import InquiryRequest

        with pytest.raises(ValidationError):
            InquiryRequest()


class TestLogging:
    """Tests for structured logging setup and redaction."""

    def test_redact_sensitive(self):
        from alipay_global.log import redact_sensitive

        event = redact_sensitive(None, "info", {
            "event": "call",
            "Signature": "abc",
            "nested": {"private_key": "k", "path": "/pay"},
        })

        assert event["Signature"] == "[REDACTED]"
        assert event["nested"] == {"private_key": "[REDACTED]", "path": "/pay"}
        assert event["event"] == "call"

    def test_setup_logging_redacts_output(self, capsys):
        from alipay_global.log import setup_logging

        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging(service_name="test-service", level="INFO", json_output=True)
            structlog.get_logger("test").info("signed", signature="abc123secret", path="/pay")

            lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]
        finally:
            structlog.reset_defaults()
            structlog.contextvars.clear_contextvars()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        entry = lines[-1]
        assert entry["event"] == "signed"
        assert entry["signature"] == "[REDACTED]"
        assert entry["path"] == "/pay"
        assert entry["service"] == "test-service"
