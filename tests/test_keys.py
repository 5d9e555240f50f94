"""
Unit Tests for Key Loading and Configuration
============================================
"""

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from alipay_global.config import AlipayAction, AlipayConfig
from alipay_global.keys import (
    KeyMaterial,
    load_private_key,
    load_private_key_file,
    load_public_key,
    load_public_key_file,
)
from alipay_global.signing import SigningError, VerificationError, VerificationStage


def _private_bytes(key, encoding, fmt):
    return key.private_bytes(encoding, fmt, serialization.NoEncryption())


def _public_bytes(key, encoding, fmt=serialization.PublicFormat.SubjectPublicKeyInfo):
    return key.public_key().public_bytes(encoding, fmt)


class TestPrivateKeyLoading:
    """Tests for private key parsing."""

    @pytest.mark.parametrize("fmt", [
        serialization.PrivateFormat.PKCS8,
        serialization.PrivateFormat.TraditionalOpenSSL,
    ])
    def test_pem(self, merchant_private_key, fmt):
        pem = _private_bytes(merchant_private_key, serialization.Encoding.PEM, fmt)

        key = load_private_key(pem.decode())

        assert key.private_numbers() == merchant_private_key.private_numbers()

    def test_der(self, merchant_private_key):
        der = _private_bytes(
            merchant_private_key, serialization.Encoding.DER, serialization.PrivateFormat.PKCS8
        )

        assert load_private_key(der).private_numbers() == merchant_private_key.private_numbers()

    def test_bare_base64(self, merchant_private_key):
        """Should load the bare base64 form handed out by the provider portal."""
        der = _private_bytes(
            merchant_private_key,
            serialization.Encoding.DER,
            serialization.PrivateFormat.TraditionalOpenSSL,
        )

        key = load_private_key(base64.b64encode(der).decode())

        assert key.private_numbers() == merchant_private_key.private_numbers()

    def test_garbage(self):
        with pytest.raises(SigningError):
            load_private_key("not a key")

    def test_non_rsa(self):
        pem = _private_bytes(
            ed25519.Ed25519PrivateKey.generate(),
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
        )

        with pytest.raises(SigningError):
            load_private_key(pem)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SigningError):
            load_private_key_file(tmp_path / "missing.pem")


class TestPublicKeyLoading:
    """Tests for public key parsing."""

    def test_pem(self, alipay_private_key):
        pem = _public_bytes(alipay_private_key, serialization.Encoding.PEM)

        assert load_public_key(pem).public_numbers() == alipay_private_key.public_key().public_numbers()

    def test_pkcs1_pem(self, alipay_private_key):
        pem = _public_bytes(
            alipay_private_key, serialization.Encoding.PEM, serialization.PublicFormat.PKCS1
        )

        assert load_public_key(pem).public_numbers() == alipay_private_key.public_key().public_numbers()

    def test_bare_base64(self, alipay_private_key):
        der = _public_bytes(alipay_private_key, serialization.Encoding.DER)

        key = load_public_key(base64.b64encode(der).decode())

        assert key.public_numbers() == alipay_private_key.public_key().public_numbers()

    def test_garbage(self):
        with pytest.raises(VerificationError) as exc_info:
            load_public_key(b"\x00\x01garbage")
        assert exc_info.value.stage == VerificationStage.KEY

    def test_file(self, tmp_path, alipay_private_key):
        path = tmp_path / "alipay_public.pem"
        path.write_bytes(_public_bytes(alipay_private_key, serialization.Encoding.PEM))

        assert load_public_key_file(path).key_size == 2048


class TestKeyMaterial:
    """Tests for the key holder."""

    def test_repr_hides_keys(self, merchant_keys):
        text = repr(merchant_keys)

        assert "<set>" in text
        assert "RSAPrivateKey" not in text

    def test_accessors(self, merchant_keys):
        assert merchant_keys.get_private_key() is merchant_keys.private_key
        assert merchant_keys.get_public_key() is merchant_keys.public_key
        assert merchant_keys.key_version == "1"


class TestConfig:
    """Tests for client configuration."""

    def _config(self, **kwargs):
        values = dict(
            client_id="SANDBOX_TEST",
            sandbox=True,
            private_key_pem=None,
            private_key_pem_file=None,
            alipay_public_key_pem=None,
            alipay_public_key_pem_file=None,
        )
        values.update(kwargs)
        return AlipayConfig(**values)

    def test_sandbox_paths(self):
        config = self._config()

        assert config.path_for(AlipayAction.PAY) == "/ams/sandbox/api/v1/payments/pay"
        assert config.url_for(AlipayAction.INQUIRY) == (
            "https://open-global.alipay.com/ams/sandbox/api/v1/payments/inquiryPayment"
        )

    def test_production_paths(self):
        config = self._config(sandbox=False)

        assert config.path_for(AlipayAction.REFUND) == "/ams/api/v1/payments/refund"

    def test_load_keys_from_pem_and_file(self, tmp_path, merchant_private_key, alipay_private_key):
        public_path = tmp_path / "alipay.pem"
        public_path.write_bytes(_public_bytes(alipay_private_key, serialization.Encoding.PEM))
        private_pem = _private_bytes(
            merchant_private_key, serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8
        ).decode()

        keys = self._config(
            private_key_pem=private_pem,
            alipay_public_key_pem_file=str(public_path),
            key_version="2",
        ).load_keys()

        assert isinstance(keys, KeyMaterial)
        assert keys.private_key.private_numbers() == merchant_private_key.private_numbers()
        assert keys.public_key.public_numbers() == alipay_private_key.public_key().public_numbers()
        assert keys.key_version == "2"

    def test_load_keys_empty(self):
        keys = self._config().load_keys()

        assert keys.private_key is None
        assert keys.public_key is None
