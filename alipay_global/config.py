"""
Client Configuration
====================
Configuration for connecting to the Alipay Global API.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog

from .keys import (
    KeyMaterial,
    load_private_key,
    load_private_key_file,
    load_public_key,
    load_public_key_file,
)

logger = structlog.get_logger(__name__)

DEFAULT_DOMAIN = "https://open-global.alipay.com"


class AlipayAction(str, Enum):
    """API operations and their path suffix."""
    PAY = "/v1/payments/pay"
    REFUND = "/v1/payments/refund"
    INQUIRY = "/v1/payments/inquiryPayment"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AlipayConfig:
    """Configuration for the Alipay Global client."""
    client_id: str = os.environ.get("ALIPAY_CLIENT_ID", "")
    sandbox: bool = _env_bool("ALIPAY_SANDBOX", True)
    domain: str = os.environ.get("ALIPAY_DOMAIN", DEFAULT_DOMAIN)
    private_key_pem: Optional[str] = os.environ.get("ALIPAY_PRIVATE_KEY")
    private_key_pem_file: Optional[str] = os.environ.get("ALIPAY_PRIVATE_KEY_FILE")
    alipay_public_key_pem: Optional[str] = os.environ.get("ALIPAY_PUBLIC_KEY")
    alipay_public_key_pem_file: Optional[str] = os.environ.get("ALIPAY_PUBLIC_KEY_FILE")
    key_version: str = os.environ.get("ALIPAY_KEY_VERSION", "1")
    timeout: float = 10.0

    @property
    def path_prefix(self) -> str:
        return "/ams/sandbox/api" if self.sandbox else "/ams/api"

    def path_for(self, action: AlipayAction) -> str:
        """Request path for an action, e.g. ``/ams/sandbox/api/v1/payments/pay``."""
        return f"{self.path_prefix}{action.value}"

    def url_for(self, action: AlipayAction) -> str:
        return f"{self.domain.rstrip('/')}{self.path_for(action)}"

    def load_keys(self) -> KeyMaterial:
        """
        Load key material from inline PEM or key files.
        
        Inline values win over files. Either key may be absent; signing or
        verification then fails when it is first needed.
        """
        private_key = None
        if self.private_key_pem:
            private_key = load_private_key(self.private_key_pem)
        elif self.private_key_pem_file:
            private_key = load_private_key_file(self.private_key_pem_file)

        public_key = None
        if self.alipay_public_key_pem:
            public_key = load_public_key(self.alipay_public_key_pem)
        elif self.alipay_public_key_pem_file:
            public_key = load_public_key_file(self.alipay_public_key_pem_file)

        logger.info(
            "Key material loaded",
            client_id=self.client_id,
            has_private_key=private_key is not None,
            has_public_key=public_key is not None,
            key_version=self.key_version,
        )
        return KeyMaterial(
            private_key=private_key,
            public_key=public_key,
            key_version=self.key_version,
        )
