import json
from typing import Any, Dict, Mapping

from jwt.algorithms import ECAlgorithm, HMACAlgorithm, RSAAlgorithm
from jwt.exceptions import InvalidKeyError as PyJWTInvalidKeyError

from ...domain.constants import Algorithm, AlgorithmFamily
from ...domain.exceptions import InvalidKeyError


class JWK:
    """
    Key source for a single JSON Web Key (RFC 7517).

    Parsing is delegated to PyJWT's algorithm classes; this adapter only
    picks the parser for the algorithm family and maps errors.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | str | bytes) -> None:
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise InvalidKeyError(f"Invalid JWK JSON: {exc}") from exc
        if not isinstance(data, Mapping):
            raise InvalidKeyError("JWK must be a JSON object")
        self._data: Dict[str, Any] = dict(data)

    @property
    def key_id(self) -> str | None:
        return self._data.get("kid")

    def __repr__(self) -> str:
        return f"JWK(kty={self._data.get('kty')!r}, kid={self.key_id!r})"

    # ------------------------------------------------------------------ #
    # KeySource implementation
    # ------------------------------------------------------------------ #

    def load(self, algorithm: Algorithm) -> Any:
        declared = self._data.get("alg")
        if declared is not None and declared != algorithm.wire_name:
            raise InvalidKeyError(f"JWK is for {declared}, not {algorithm}")

        family = algorithm.family
        if family is AlgorithmFamily.HMAC:
            parser = HMACAlgorithm
        elif family in (AlgorithmFamily.RSA, AlgorithmFamily.RSA_PSS):
            parser = RSAAlgorithm
        elif family is AlgorithmFamily.ECDSA:
            parser = ECAlgorithm
        else:
            raise InvalidKeyError(f"No JWK parser for {algorithm}")

        try:
            return parser.from_jwk(json.dumps(self._data))
        except (PyJWTInvalidKeyError, KeyError, ValueError, TypeError) as exc:
            raise InvalidKeyError(f"Invalid JWK for {algorithm}: {exc}") from exc
