import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from alipay_global.keys import KeyMaterial

CLIENT_ID = "SANDBOX_TEST"


@pytest.fixture(scope="session")
def merchant_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def alipay_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def merchant_keys(merchant_private_key, alipay_private_key):
    """Keys held by the merchant: own private key, Alipay's public key."""
    return KeyMaterial(
        private_key=merchant_private_key,
        public_key=alipay_private_key.public_key(),
    )


@pytest.fixture(scope="session")
def alipay_keys(merchant_private_key, alipay_private_key):
    """Keys held by the counterparty, used to play Alipay's side in tests."""
    return KeyMaterial(
        private_key=alipay_private_key,
        public_key=merchant_private_key.public_key(),
    )
