from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, Mapping

from ...domain.entities import Claims, Header
from ...domain.exceptions import (
    InvalidAlgorithmError,
    InvalidSignatureError,
    MalformedTokenError,
    UnsupportedAlgorithmError,
)
from ...domain.ports import HeaderBinding, PayloadBinding, SignatureBinding, Signer
from ..codec import decode_object, split_token

logger = logging.getLogger(__name__)


def _check_target(target: Any) -> None:
    if isinstance(target, (HeaderBinding, PayloadBinding, SignatureBinding)):
        return
    if isinstance(target, MutableMapping):
        return
    raise TypeError(
        f"Cannot decode into {type(target).__name__}: implement bind_header/"
        "bind_payload/bind_signature or pass a mutable mapping"
    )


@dataclass(slots=True)
class DecodeTokenUseCase:
    """
    Application use case:
    - Split the compact token
    - Verify the signature before looking at header or payload
    - Check the header algorithm against the signer's own
    - Bind header, payload and signature into the caller's target

    Every step that can fail runs before the first write to the target, so a
    rejected token leaves the target as it was.
    """

    signer: Signer

    def execute(self, token: bytes | str, target: Any = None) -> Any:
        """
        Decode and verify `token` into `target` (a new Claims if omitted).

        Raises:
            MalformedTokenError
            InvalidSignatureError
            InvalidAlgorithmError
            TypeError if `target` cannot receive anything
        """
        if target is None:
            target = Claims()
        _check_target(target)

        algorithm = self.signer.algorithm

        # split
        try:
            ut = split_token(token)
        except MalformedTokenError as exc:
            logger.debug("Rejected %s token: %s", algorithm, exc)
            raise

        # signature first
        try:
            signature = self.signer.verify(ut.signing_input, ut.signature)
        except InvalidSignatureError:
            logger.debug("Rejected %s token: invalid signature", algorithm)
            raise

        # header
        try:
            header = Header.from_dict(decode_object(ut.header))
        except UnsupportedAlgorithmError as exc:
            logger.debug("Rejected %s token: unknown header algorithm", algorithm)
            raise InvalidAlgorithmError(f"Invalid algorithm: {exc}") from exc
        except MalformedTokenError as exc:
            logger.debug("Rejected %s token: %s", algorithm, exc)
            raise
        except (TypeError, ValueError) as exc:
            logger.debug("Rejected %s token: bad header", algorithm)
            raise MalformedTokenError(f"Invalid header: {exc}") from exc

        # the header algorithm must be the signer's own
        if header.algorithm is not algorithm:
            logger.debug("Rejected %s token: header claims %s", algorithm, header.algorithm)
            raise InvalidAlgorithmError(
                f"Invalid algorithm: expected {algorithm}, got {header.algorithm}"
            )

        # payload, validated as registered claims
        try:
            payload: Mapping[str, Any] = decode_object(ut.payload)
            Claims.from_dict(payload)
        except MalformedTokenError as exc:
            logger.debug("Rejected %s token: %s", algorithm, exc)
            raise
        except (TypeError, ValueError) as exc:
            logger.debug("Rejected %s token: bad claims", algorithm)
            raise MalformedTokenError(f"Invalid claims: {exc}") from exc

        # nothing has been written to the target yet
        self._bind(target, header, payload, signature)
        return target

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _bind(target: Any, header: Header, payload: Mapping[str, Any], signature: bytes) -> None:
        bound = False

        if isinstance(target, HeaderBinding):
            target.bind_header(header)
            bound = True

        if isinstance(target, PayloadBinding):
            target.bind_payload(payload)
            bound = True

        if isinstance(target, SignatureBinding):
            target.bind_signature(signature)
            bound = True

        # untagged target: the target itself is the payload
        if not bound:
            target.update(payload)
