from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .constants import TOKEN_TYPE, Algorithm
from .value_objects import (
    Audience,
    NumericDate,
    from_numeric_date,
    to_numeric_date,
)


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _optional_date(data: Mapping[str, Any], key: str) -> Optional[NumericDate]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, datetime):
        raise TypeError(f"{key!r} must be a NumericDate on the wire")
    return to_numeric_date(value)


@dataclass(slots=True)
class Header:
    """
    JOSE header of a token.

    `algorithm` is always written; `type` defaults to "JWT". Header
    parameters this library does not model are kept in `extra`.
    """
    algorithm: Algorithm
    type: Optional[str] = TOKEN_TYPE
    key_id: Optional[str] = None
    content_type: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _WIRE_KEYS = ("alg", "typ", "kid", "cty")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"alg": self.algorithm.wire_name}
        if self.type is not None:
            out["typ"] = self.type
        if self.key_id is not None:
            out["kid"] = self.key_id
        if self.content_type is not None:
            out["cty"] = self.content_type
        for k, v in self.extra.items():
            out.setdefault(k, v)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Header":
        """
        Raises:
            ValueError / TypeError for a structurally invalid header
            UnsupportedAlgorithmError for an unknown `alg`
        """
        if not isinstance(data, Mapping):
            raise TypeError("header must be a JSON object")
        if "alg" not in data:
            raise ValueError("header is missing 'alg'")

        typ = _optional_str(data, "typ")
        return cls(
            algorithm=Algorithm.from_name(data["alg"]),
            type=typ if "typ" in data else TOKEN_TYPE,
            key_id=_optional_str(data, "kid"),
            content_type=_optional_str(data, "cty"),
            extra={k: v for k, v in data.items() if k not in cls._WIRE_KEYS},
        )


@dataclass(slots=True)
class Claims:
    """
    Registered JWT claims plus any caller-defined ones in `extra`.

    Time fields hold NumericDate values (seconds since the epoch); a
    datetime passed in is converted on construction. This class does not
    check expiry or audience, that is left to the caller.
    """
    issuer: Optional[str] = None
    subject: Optional[str] = None
    audience: Optional[Audience] = None
    expiry: Optional[NumericDate] = None
    not_before: Optional[NumericDate] = None
    issued_at: Optional[NumericDate] = None
    token_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _WIRE_KEYS = ("iss", "sub", "aud", "exp", "nbf", "iat", "jti")

    def __post_init__(self) -> None:
        if self.audience is not None and not isinstance(self.audience, Audience):
            self.audience = Audience(self.audience)
        for name in ("expiry", "not_before", "issued_at"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, to_numeric_date(value))

    # ---- wire mapping -----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.issuer is not None:
            out["iss"] = self.issuer
        if self.subject is not None:
            out["sub"] = self.subject
        if self.audience is not None:
            out["aud"] = self.audience.to_json()
        if self.expiry is not None:
            out["exp"] = self.expiry
        if self.not_before is not None:
            out["nbf"] = self.not_before
        if self.issued_at is not None:
            out["iat"] = self.issued_at
        if self.token_id is not None:
            out["jti"] = self.token_id
        for k, v in self.extra.items():
            out.setdefault(k, v)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Claims":
        """
        Raises:
            TypeError / ValueError when a registered claim has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise TypeError("claims must be a JSON object")

        aud = data.get("aud")
        return cls(
            issuer=_optional_str(data, "iss"),
            subject=_optional_str(data, "sub"),
            audience=Audience.from_json(aud) if aud is not None else None,
            expiry=_optional_date(data, "exp"),
            not_before=_optional_date(data, "nbf"),
            issued_at=_optional_date(data, "iat"),
            token_id=_optional_str(data, "jti"),
            extra={k: v for k, v in data.items() if k not in cls._WIRE_KEYS},
        )

    # ---- binding ----------------------------------------------------------

    def bind_payload(self, payload: Mapping[str, Any]) -> None:
        decoded = Claims.from_dict(payload)
        for f in fields(self):
            setattr(self, f.name, getattr(decoded, f.name))

    # ---- datetime shortcuts -----------------------------------------------

    @property
    def expires_at(self) -> Optional[datetime]:
        return from_numeric_date(self.expiry) if self.expiry is not None else None

    @property
    def not_before_at(self) -> Optional[datetime]:
        return from_numeric_date(self.not_before) if self.not_before is not None else None

    @property
    def issued_at_time(self) -> Optional[datetime]:
        return from_numeric_date(self.issued_at) if self.issued_at is not None else None


@dataclass(slots=True)
class Token:
    """
    Header, payload and raw signature of a token, side by side.

    Encoding a Token signs its own header verbatim, so callers can set `kid`
    or other header fields. Decoding into a Token fills all three parts.
    """
    header: Optional[Header] = None
    payload: Any = field(default_factory=Claims)
    signature: bytes = b""

    def bind_header(self, header: Header) -> None:
        self.header = header

    def bind_payload(self, payload: Mapping[str, Any]) -> None:
        if hasattr(self.payload, "bind_payload"):
            self.payload.bind_payload(payload)
        elif isinstance(self.payload, dict):
            self.payload.clear()
            self.payload.update(payload)
        else:
            self.payload = Claims.from_dict(payload)

    def bind_signature(self, signature: bytes) -> None:
        self.signature = signature


@dataclass(frozen=True, slots=True)
class UnverifiedToken:
    """
    The three still-encoded segments of an incoming token.

    Nothing in here has been verified; it only lives for one decode call.
    """
    header: bytes
    payload: bytes
    signature: bytes

    @property
    def signing_input(self) -> bytes:
        return self.header + b"." + self.payload


@dataclass(frozen=True, slots=True)
class KeyPair:
    """
    Asymmetric key material as loaded by a key source.

    Either half may be missing: a public key alone can only verify.
    """
    private_key: Any = None
    public_key: Any = None
