# tests/conftest.py
import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from pkg_jwt import Algorithm, AlgorithmFamily

HMAC_SECRET = b"a-shared-secret-that-is-long-enough-for-hs512-0123456789abcdefgh"

_CURVES = {
    Algorithm.ES256: ec.SECP256R1,
    Algorithm.ES384: ec.SECP384R1,
    Algorithm.ES512: ec.SECP521R1,
}


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_keys() -> dict:
    return {alg: ec.generate_private_key(curve()) for alg, curve in _CURVES.items()}


@pytest.fixture(scope="session")
def key_for(rsa_key, ec_keys):
    """Private key material for any Algorithm."""

    def _key(alg: Algorithm):
        if alg.family is AlgorithmFamily.HMAC:
            return HMAC_SECRET
        if alg.family in (AlgorithmFamily.RSA, AlgorithmFamily.RSA_PSS):
            return rsa_key
        if alg.family is AlgorithmFamily.ECDSA:
            return ec_keys[alg]
        raise AssertionError(f"no test key for {alg}")

    return _key


@pytest.fixture(scope="session")
def signer_for(key_for):
    """Signer (private key bound) for any Algorithm."""
    cache = {}

    def _signer(alg: Algorithm):
        if alg not in cache:
            cache[alg] = alg.new(key_for(alg))
        return cache[alg]

    return _signer


@pytest.fixture(scope="session")
def verifier_for(key_for):
    """Verify-only signer: public key for asymmetric algorithms."""

    def _verifier(alg: Algorithm):
        key = key_for(alg)
        if alg.family is AlgorithmFamily.HMAC:
            return alg.new(key)
        return alg.new(key.public_key())

    return _verifier


@pytest.fixture(scope="session")
def hmac_secret() -> bytes:
    return HMAC_SECRET
