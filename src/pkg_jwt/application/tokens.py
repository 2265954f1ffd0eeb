from __future__ import annotations

from typing import Any

from ..domain.entities import Header
from ..domain.exceptions import MalformedTokenError, UnsupportedAlgorithmError
from ..domain.ports import Signer
from .codec import decode_object, split_token
from .use_cases.decode import DecodeTokenUseCase
from .use_cases.encode import EncodeTokenUseCase


def encode(signer: Signer, obj: Any) -> bytes:
    """Encode `obj` as a token signed by `signer`."""
    return EncodeTokenUseCase(signer=signer).execute(obj)


def decode(signer: Signer, token: bytes | str, target: Any = None) -> Any:
    """
    Decode and verify `token` with `signer`, storing the result in `target`.

    If the signature is invalid, InvalidSignatureError is raised; see
    DecodeTokenUseCase for the other failures.
    """
    return DecodeTokenUseCase(signer=signer).execute(token, target)


def get_unverified_header(token: bytes | str) -> Header:
    """
    Read a token's header WITHOUT verifying its signature.

    Only use it to select a key (e.g. by `kid`); never trust its content.

    Raises:
        MalformedTokenError
        UnsupportedAlgorithmError for an unknown `alg`
    """
    ut = split_token(token)
    try:
        return Header.from_dict(decode_object(ut.header))
    except UnsupportedAlgorithmError:
        raise
    except (TypeError, ValueError) as exc:
        raise MalformedTokenError(f"Invalid header: {exc}") from exc
