from __future__ import annotations

from typing import Any

from ...adapters.keys.jwk import JWK
from ...adapters.keys.pem import PEM
from ...domain.constants import Algorithm
from ...domain.exceptions import InvalidKeyError
from ...domain.ports import Signer
from .settings import SignerSettings


def create_signer_from_settings(settings: SignerSettings) -> Signer:
    """
    High-level factory: SignerSettings -> Signer.

    Meant to run once at startup; the returned signer is immutable and can
    be shared by every request handler. To rotate keys, build a new signer
    and swap the reference.

    Raises:
        UnsupportedAlgorithmError for an unknown algorithm name
        InvalidKeyError when no key, several keys or a bad key is configured
    """
    algorithm = Algorithm.from_name(settings.algorithm)

    configured = settings.key_sources
    if len(configured) != 1:
        raise InvalidKeyError(
            f"Exactly one key source must be configured for {algorithm}, "
            f"got: {', '.join(configured) or 'none'}"
        )

    key: Any
    if settings.secret is not None:
        key = settings.secret
    elif settings.pem_paths:
        key = PEM(*settings.pem_paths, password=settings.pem_password)
    else:
        key = JWK(settings.jwk)

    return algorithm.new(key)
