from __future__ import annotations

import base64
import binascii
import dataclasses
import json
import re
from datetime import datetime
from typing import Any, Mapping

from ..domain.exceptions import MalformedTokenError
from ..domain.entities import UnverifiedToken
from ..domain.value_objects import Audience, to_numeric_date

TOKEN_SEP = b"."

# URL-safe base64 alphabet, no padding
_B64URL_RE = re.compile(rb"[A-Za-z0-9_\-]*")


# ---- Base64url --------------------------------------------------------------


def b64url_encode(data: bytes) -> bytes:
    """
    Base64url encode without padding, as required by JWS.
    """
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def b64url_decode(data: bytes | str) -> bytes:
    """
    Base64url decode, adding back any missing padding.

    Trailing padding is tolerated; any other character outside the URL-safe
    alphabet is rejected rather than skipped.
    """
    if isinstance(data, str):
        try:
            data = data.encode("ascii")
        except UnicodeEncodeError as exc:
            raise MalformedTokenError("base64url value is not ASCII") from exc

    data = data.rstrip(b"=")
    if not _B64URL_RE.fullmatch(data):
        raise MalformedTokenError("Invalid base64url characters")
    if len(data) % 4 == 1:
        raise MalformedTokenError("Invalid base64url length")

    padded = data + b"=" * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise MalformedTokenError(f"Invalid base64url: {exc}") from exc


# ---- JSON -------------------------------------------------------------------


def _json_default(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, Audience):
        return obj.to_json()
    if isinstance(obj, datetime):
        return to_numeric_date(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if isinstance(obj, bytes):
        return b64url_encode(obj).decode("ascii")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"Invalid JSON constant {name}")


def to_json(obj: Any) -> bytes:
    """
    Compact UTF-8 JSON for a header or payload value.

    Raises ValueError for NaN or infinite floats.
    """
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    return json.dumps(
        obj,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=_json_default,
    ).encode("utf-8")


def encode_segment(obj: Any) -> bytes:
    """
    JSON-encode then base64url-encode a header or payload.
    """
    return b64url_encode(to_json(obj))


def decode_segment(segment: bytes) -> Any:
    """
    Decode a base64url-encoded JSON segment (header or payload).
    """
    raw = b64url_decode(segment)
    try:
        return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedTokenError(f"Invalid JSON segment: {exc}") from exc


def decode_object(segment: bytes) -> Mapping[str, Any]:
    value = decode_segment(segment)
    if not isinstance(value, dict):
        raise MalformedTokenError("Segment is not a JSON object")
    return value


# ---- Compact serialization --------------------------------------------------


def signing_input(header_segment: bytes, payload_segment: bytes) -> bytes:
    return header_segment + TOKEN_SEP + payload_segment


def join_segments(signing_input: bytes, signature_segment: bytes) -> bytes:
    return signing_input + TOKEN_SEP + signature_segment


def split_token(token: bytes | str) -> UnverifiedToken:
    """
    Split a compact token into its 3 raw segments.

    Raises MalformedTokenError unless there are exactly three non-empty
    segments. No segment is decoded here.
    """
    if isinstance(token, str):
        try:
            token = token.encode("ascii")
        except UnicodeEncodeError as exc:
            raise MalformedTokenError("Token is not ASCII") from exc
    elif isinstance(token, (bytearray, memoryview)):
        token = bytes(token)
    elif not isinstance(token, bytes):
        raise MalformedTokenError(f"Token must be bytes or str, got {type(token).__name__}")

    parts = token.split(TOKEN_SEP)
    if len(parts) != 3:
        raise MalformedTokenError(f"Token must have 3 segments, got {len(parts)}")
    if not all(parts):
        raise MalformedTokenError("Token has an empty segment")
    return UnverifiedToken(header=parts[0], payload=parts[1], signature=parts[2])
