from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ...domain.entities import Token
from ...domain.ports import Signer
from ..codec import encode_segment, join_segments, signing_input

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EncodeTokenUseCase:
    """
    Application use case:
    - Pick the header (the signer's canonical one, or a Token's own header)
    - JSON + base64url encode header and payload
    - Sign `header.payload` and append the signature segment
    """

    signer: Signer

    def execute(self, obj: Any) -> bytes:
        """
        Encode `obj` as a signed compact token.

        Raises:
            InvalidKeyError if the signer cannot sign (public key only)
            TypeError if the header or payload is not JSON serializable
            ValueError for NaN or infinite numbers
        """
        if isinstance(obj, Token):
            header = obj.header if obj.header is not None else self.signer.algorithm.header()
            payload = obj.payload
        else:
            header = self.signer.algorithm.header()
            payload = obj

        data = signing_input(encode_segment(header), encode_segment(payload))
        signature = self.signer.sign(data)

        logger.debug("Encoded token with %s", self.signer.algorithm)
        return join_segments(data, signature)
