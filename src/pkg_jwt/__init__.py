"""
pkg_jwt

Encode, decode and verify compact JSON Web Tokens (RFC 7519 / RFC 7515).

    # create a signer from a key on disk
    rs384 = Algorithm.RS384.new(PEM("myrsakey.pem"))

    # encode claims as a token
    token = rs384.encode(Claims(issuer="user@example.com"))

    # decode and verify claims
    try:
        claims = rs384.decode(token, Claims())
    except InvalidSignatureError:
        ...  # invalid signature
    except JWTError:
        ...  # any other rejection

Signers are immutable and safe to share between threads. RSA-PSS and ECDSA
signatures are randomized, so re-encoding the same claims gives a different
token each time; both verify.
"""

import logging

__version__ = "0.1.0"

from .domain.constants import Algorithm, AlgorithmFamily, KeyType, TOKEN_TYPE
from .domain.entities import Claims, Header, KeyPair, Token, UnverifiedToken
from .domain.exceptions import (
    JWTError,
    InvalidTokenError,
    MalformedTokenError,
    InvalidSignatureError,
    InvalidAlgorithmError,
    UnsupportedAlgorithmError,
    InvalidKeyError,
)
from .domain.value_objects import Audience
from .domain.ports import (
    Signer,
    KeySource,
    HeaderBinding,
    PayloadBinding,
    SignatureBinding,
)

from .application.tokens import encode, decode, get_unverified_header
from .application.use_cases.encode import EncodeTokenUseCase
from .application.use_cases.decode import DecodeTokenUseCase

# Crypto + key adapters
from .adapters.crypto.signers import (
    HMACSigner,
    RSASigner,
    RSAPSSSigner,
    ECDSASigner,
    create_signer,
)
from .adapters.keys.pem import PEM
from .adapters.keys.jwk import JWK

from .integrations.common.settings import SignerSettings
from .integrations.common.signer_factory import create_signer_from_settings

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # domain core
    "Algorithm",
    "AlgorithmFamily",
    "KeyType",
    "TOKEN_TYPE",
    "Claims",
    "Header",
    "KeyPair",
    "Token",
    "UnverifiedToken",
    "Audience",
    "Signer",
    "KeySource",
    "HeaderBinding",
    "PayloadBinding",
    "SignatureBinding",
    # exceptions
    "JWTError",
    "InvalidTokenError",
    "MalformedTokenError",
    "InvalidSignatureError",
    "InvalidAlgorithmError",
    "UnsupportedAlgorithmError",
    "InvalidKeyError",
    # use cases
    "encode",
    "decode",
    "get_unverified_header",
    "EncodeTokenUseCase",
    "DecodeTokenUseCase",
    # adapters
    "HMACSigner",
    "RSASigner",
    "RSAPSSSigner",
    "ECDSASigner",
    "create_signer",
    "PEM",
    "JWK",
    # integrations
    "SignerSettings",
    "create_signer_from_settings",
]
