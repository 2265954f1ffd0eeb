from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from cryptography.hazmat.primitives import hashes

from .exceptions import UnsupportedAlgorithmError

if TYPE_CHECKING:
    from .entities import Header
    from .ports import Signer


TOKEN_TYPE = "JWT"


class KeyType(Enum):
    SYMMETRIC = "symmetric"
    ASYMMETRIC = "asymmetric"


class AlgorithmFamily(Enum):
    HMAC = "hmac"
    RSA = "rsa"
    RSA_PSS = "rsa_pss"
    ECDSA = "ecdsa"

    @property
    def key_type(self) -> KeyType:
        if self is AlgorithmFamily.HMAC:
            return KeyType.SYMMETRIC
        return KeyType.ASYMMETRIC


class Algorithm(Enum):
    """
    Closed set of supported JWS signing algorithms.

    Each member carries its wire name (the `alg` header value), its family
    and the width of the hash it signs with.
    """

    HS256 = ("HS256", AlgorithmFamily.HMAC, 256)
    HS384 = ("HS384", AlgorithmFamily.HMAC, 384)
    HS512 = ("HS512", AlgorithmFamily.HMAC, 512)
    RS256 = ("RS256", AlgorithmFamily.RSA, 256)
    RS384 = ("RS384", AlgorithmFamily.RSA, 384)
    RS512 = ("RS512", AlgorithmFamily.RSA, 512)
    PS256 = ("PS256", AlgorithmFamily.RSA_PSS, 256)
    PS384 = ("PS384", AlgorithmFamily.RSA_PSS, 384)
    PS512 = ("PS512", AlgorithmFamily.RSA_PSS, 512)
    ES256 = ("ES256", AlgorithmFamily.ECDSA, 256)
    ES384 = ("ES384", AlgorithmFamily.ECDSA, 384)
    ES512 = ("ES512", AlgorithmFamily.ECDSA, 512)

    def __init__(self, wire_name: str, family: AlgorithmFamily, hash_width: int) -> None:
        self.wire_name = wire_name
        self.family = family
        self.hash_width = hash_width

    def __str__(self) -> str:
        return self.wire_name

    # ---- lookups -----------------------------------------------------------

    @classmethod
    def from_name(cls, name: Any) -> "Algorithm":
        """
        Parse a wire name ("HS256", ...) back into its Algorithm.

        Raises:
            UnsupportedAlgorithmError for anything outside the closed set.
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            for alg in cls:
                if alg.wire_name == name:
                    return alg
        raise UnsupportedAlgorithmError(f"Unsupported algorithm: {name!r}")

    @property
    def key_type(self) -> KeyType:
        return self.family.key_type

    @property
    def curve_name(self) -> str | None:
        """Name of the elliptic curve an ECDSA algorithm requires."""
        if self.family is not AlgorithmFamily.ECDSA:
            return None
        if self.hash_width == 256:
            return "secp256r1"
        if self.hash_width == 384:
            return "secp384r1"
        return "secp521r1"

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        if self.hash_width == 256:
            return hashes.SHA256()
        if self.hash_width == 384:
            return hashes.SHA384()
        if self.hash_width == 512:
            return hashes.SHA512()
        raise UnsupportedAlgorithmError(f"No hash for width {self.hash_width}")

    # ---- construction ------------------------------------------------------

    def header(self) -> "Header":
        """Canonical header emitted for tokens signed with this algorithm."""
        from .entities import Header

        return Header(algorithm=self, type=TOKEN_TYPE)

    def new(self, key: Any) -> "Signer":
        """
        Build a Signer bound to this algorithm and the given key material.

        `key` may be a shared secret (bytes/str) for HMAC, a `cryptography`
        key object or KeyPair for the asymmetric families, or any KeySource.
        """
        from ..adapters.crypto.signers import create_signer

        return create_signer(self, key)
