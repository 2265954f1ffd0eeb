from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Any, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ...application.codec import b64url_decode, b64url_encode
from ...application.use_cases.decode import DecodeTokenUseCase
from ...application.use_cases.encode import EncodeTokenUseCase
from ...domain.constants import Algorithm, AlgorithmFamily
from ...domain.entities import KeyPair
from ...domain.exceptions import (
    InvalidKeyError,
    InvalidSignatureError,
    MalformedTokenError,
    UnsupportedAlgorithmError,
)

logger = logging.getLogger(__name__)

_HASHLIB_NAMES = {256: "sha256", 384: "sha384", 512: "sha512"}


def _decode_signature(signature: bytes | str) -> bytes:
    try:
        raw = b64url_decode(signature)
    except MalformedTokenError as exc:
        raise InvalidSignatureError("Invalid signature") from exc
    if not raw:
        raise InvalidSignatureError("Invalid signature")

    # only the canonical encoding of the signature is accepted
    if isinstance(signature, str):
        signature = signature.encode("ascii")
    if b64url_encode(raw) != bytes(signature).rstrip(b"="):
        raise InvalidSignatureError("Invalid signature")
    return raw


def _check_key_pair(algorithm: Algorithm, private_key: Any, public_key: Any) -> None:
    if private_key is None or public_key is None:
        return
    if private_key.public_key().public_numbers() != public_key.public_numbers():
        raise InvalidKeyError(f"{algorithm} private and public keys do not match")


class _TokenMixin:
    """Encode/Decode on top of sign/verify, shared by every signer."""

    __slots__ = ()

    def encode(self, obj: Any) -> bytes:
        """
        Encode `obj` as a signed token.

        A Token is signed with its own header; anything else is signed as the
        payload under this signer's canonical header.
        """
        return EncodeTokenUseCase(signer=self).execute(obj)

    def decode(self, token: bytes | str, target: Any = None) -> Any:
        """
        Verify `token` and bind it into `target` (a new Claims if omitted).
        """
        return DecodeTokenUseCase(signer=self).execute(token, target)


# ---------------------------------------------------------------------- #
# HMAC
# ---------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True, repr=False)
class HMACSigner(_TokenMixin):
    """HS256 / HS384 / HS512 over a shared secret."""

    algorithm: Algorithm
    secret: bytes

    def __post_init__(self) -> None:
        if self.algorithm.family is not AlgorithmFamily.HMAC:
            raise UnsupportedAlgorithmError(f"{self.algorithm} is not an HMAC algorithm")
        if not isinstance(self.secret, bytes) or not self.secret:
            raise InvalidKeyError(f"{self.algorithm} requires a non-empty secret")

    def __repr__(self) -> str:
        return f"HMACSigner(algorithm={self.algorithm})"

    def _mac(self, data: bytes) -> bytes:
        return hmac.new(self.secret, data, _HASHLIB_NAMES[self.algorithm.hash_width]).digest()

    def sign(self, data: bytes) -> bytes:
        return b64url_encode(self._mac(data))

    def verify(self, data: bytes, signature: bytes | str) -> bytes:
        raw = _decode_signature(signature)
        if not hmac.compare_digest(self._mac(data), raw):
            raise InvalidSignatureError("Invalid signature")
        return raw


# ---------------------------------------------------------------------- #
# RSA (PKCS#1 v1.5 and PSS)
# ---------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True, repr=False)
class RSASigner(_TokenMixin):
    """RS256 / RS384 / RS512: RSASSA-PKCS1-v1_5, deterministic."""

    algorithm: Algorithm
    private_key: Optional[rsa.RSAPrivateKey] = None
    public_key: Optional[rsa.RSAPublicKey] = None

    _FAMILY = AlgorithmFamily.RSA

    def __post_init__(self) -> None:
        if self.algorithm.family is not self._FAMILY:
            raise UnsupportedAlgorithmError(
                f"{self.algorithm} cannot be used with {type(self).__name__}"
            )
        if self.private_key is not None and not isinstance(self.private_key, rsa.RSAPrivateKey):
            raise InvalidKeyError(f"{self.algorithm} requires an RSA private key")
        if self.public_key is not None and not isinstance(self.public_key, rsa.RSAPublicKey):
            raise InvalidKeyError(f"{self.algorithm} requires an RSA public key")
        if self.private_key is None and self.public_key is None:
            raise InvalidKeyError(f"{self.algorithm} requires an RSA key")
        _check_key_pair(self.algorithm, self.private_key, self.public_key)
        if self.public_key is None:
            object.__setattr__(self, "public_key", self.private_key.public_key())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(algorithm={self.algorithm}, "
            f"can_sign={self.private_key is not None})"
        )

    def _padding(self) -> padding.AsymmetricPadding:
        return padding.PKCS1v15()

    def sign(self, data: bytes) -> bytes:
        if self.private_key is None:
            raise InvalidKeyError(f"{self.algorithm} signer has no private key")
        sig = self.private_key.sign(data, self._padding(), self.algorithm.hash_algorithm())
        return b64url_encode(sig)

    def verify(self, data: bytes, signature: bytes | str) -> bytes:
        raw = _decode_signature(signature)
        try:
            self.public_key.verify(raw, data, self._padding(), self.algorithm.hash_algorithm())
        except (InvalidSignature, ValueError) as exc:
            raise InvalidSignatureError("Invalid signature") from exc
        return raw


@dataclass(frozen=True, slots=True, repr=False)
class RSAPSSSigner(RSASigner):
    """
    PS256 / PS384 / PS512: RSASSA-PSS with MGF1 and a digest-sized salt.

    Signatures are randomized; re-signing the same input gives new bytes.
    """

    _FAMILY = AlgorithmFamily.RSA_PSS

    def _padding(self) -> padding.AsymmetricPadding:
        hash_alg = self.algorithm.hash_algorithm()
        return padding.PSS(mgf=padding.MGF1(hash_alg), salt_length=hash_alg.digest_size)


# ---------------------------------------------------------------------- #
# ECDSA
# ---------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True, repr=False)
class ECDSASigner(_TokenMixin):
    """
    ES256 / ES384 / ES512 with JOSE `r || s` signatures.

    Signatures are randomized; re-signing the same input gives new bytes.
    """

    algorithm: Algorithm
    private_key: Optional[ec.EllipticCurvePrivateKey] = None
    public_key: Optional[ec.EllipticCurvePublicKey] = None

    def __post_init__(self) -> None:
        if self.algorithm.family is not AlgorithmFamily.ECDSA:
            raise UnsupportedAlgorithmError(f"{self.algorithm} is not an ECDSA algorithm")
        if self.private_key is not None and not isinstance(
            self.private_key, ec.EllipticCurvePrivateKey
        ):
            raise InvalidKeyError(f"{self.algorithm} requires an EC private key")
        if self.public_key is not None and not isinstance(
            self.public_key, ec.EllipticCurvePublicKey
        ):
            raise InvalidKeyError(f"{self.algorithm} requires an EC public key")
        if self.private_key is None and self.public_key is None:
            raise InvalidKeyError(f"{self.algorithm} requires an EC key")

        for key in (self.private_key, self.public_key):
            if key is not None and key.curve.name != self.algorithm.curve_name:
                raise InvalidKeyError(
                    f"{self.algorithm} requires curve {self.algorithm.curve_name}, "
                    f"got {key.curve.name}"
                )
        _check_key_pair(self.algorithm, self.private_key, self.public_key)
        if self.public_key is None:
            object.__setattr__(self, "public_key", self.private_key.public_key())

    def __repr__(self) -> str:
        return f"ECDSASigner(algorithm={self.algorithm}, can_sign={self.private_key is not None})"

    @property
    def _coordinate_size(self) -> int:
        return (self.public_key.curve.key_size + 7) // 8

    def sign(self, data: bytes) -> bytes:
        if self.private_key is None:
            raise InvalidKeyError(f"{self.algorithm} signer has no private key")
        der = self.private_key.sign(data, ec.ECDSA(self.algorithm.hash_algorithm()))
        r, s = decode_dss_signature(der)
        size = self._coordinate_size
        return b64url_encode(r.to_bytes(size, "big") + s.to_bytes(size, "big"))

    def verify(self, data: bytes, signature: bytes | str) -> bytes:
        raw = _decode_signature(signature)
        size = self._coordinate_size
        if len(raw) != 2 * size:
            raise InvalidSignatureError("Invalid signature")

        r = int.from_bytes(raw[:size], "big")
        s = int.from_bytes(raw[size:], "big")
        try:
            self.public_key.verify(
                encode_dss_signature(r, s), data, ec.ECDSA(self.algorithm.hash_algorithm())
            )
        except (InvalidSignature, ValueError) as exc:
            raise InvalidSignatureError("Invalid signature") from exc
        return raw


# ---------------------------------------------------------------------- #
# Factory
# ---------------------------------------------------------------------- #


def _resolve_key(algorithm: Algorithm, key: Any) -> Any:
    # KeySource: anything with a load(algorithm) method
    if hasattr(key, "load") and callable(key.load):
        return key.load(algorithm)
    return key


def _split_asymmetric(key: Any) -> tuple[Any, Any]:
    if isinstance(key, KeyPair):
        return key.private_key, key.public_key
    if isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        return key, None
    if isinstance(key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        return None, key
    raise InvalidKeyError(f"Unsupported key material: {type(key).__name__}")


def create_signer(algorithm: Algorithm, key: Any) -> HMACSigner | RSASigner | ECDSASigner:
    """
    Build the concrete signer for `algorithm` bound to `key`.

    Raises:
        UnsupportedAlgorithmError if `algorithm` is not an Algorithm
        InvalidKeyError if the key does not fit the algorithm
    """
    if not isinstance(algorithm, Algorithm):
        raise UnsupportedAlgorithmError(f"Unsupported algorithm: {algorithm!r}")

    material = _resolve_key(algorithm, key)
    family = algorithm.family

    if family is AlgorithmFamily.HMAC:
        if isinstance(material, str):
            material = material.encode("utf-8")
        if isinstance(material, (bytearray, memoryview)):
            material = bytes(material)
        if not isinstance(material, bytes):
            raise InvalidKeyError(f"{algorithm} requires a shared secret, got {type(material).__name__}")
        signer: HMACSigner | RSASigner | ECDSASigner = HMACSigner(algorithm, material)
    elif family is AlgorithmFamily.RSA:
        private_key, public_key = _split_asymmetric(material)
        signer = RSASigner(algorithm, private_key, public_key)
    elif family is AlgorithmFamily.RSA_PSS:
        private_key, public_key = _split_asymmetric(material)
        signer = RSAPSSSigner(algorithm, private_key, public_key)
    elif family is AlgorithmFamily.ECDSA:
        private_key, public_key = _split_asymmetric(material)
        signer = ECDSASigner(algorithm, private_key, public_key)
    else:
        raise UnsupportedAlgorithmError(f"Unsupported algorithm family: {family}")

    logger.debug("Created %r", signer)
    return signer
