# src/pkg_jwt/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Iterator, Tuple, Union

NumericDate = Union[int, float]


# --- Audience --------------------------------------------------------------


def _normalize(values: Iterable[str] | str) -> Tuple[str, ...]:
    """
    Normalize an iterable of strings into a tuple without duplicates.
    If a plain string is passed, treat it as a single-element collection.
    """
    if isinstance(values, str):
        return (values,)
    seen: list[str] = []
    for v in values:
        if not isinstance(v, str):
            raise TypeError(f"Audience values must be strings, got {type(v).__name__}")
        if v not in seen:
            seen.append(v)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class Audience:
    """
    The `aud` claim: one recipient or an ordered set of recipients.

    A single audience goes on the wire as a JSON string, several as a list.
    """

    values: Tuple[str, ...] = ()

    def __init__(self, values: Iterable[str] | str = ()) -> None:
        object.__setattr__(self, "values", _normalize(values))

    def __contains__(self, item: object) -> bool:
        return item in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __str__(self) -> str:
        return " ".join(self.values)

    def to_json(self) -> str | list[str]:
        if len(self.values) == 1:
            return self.values[0]
        return list(self.values)

    @classmethod
    def from_json(cls, raw: object) -> "Audience":
        if isinstance(raw, str):
            return cls(raw)
        if isinstance(raw, list):
            return cls(raw)
        raise TypeError(f"aud must be a string or a list of strings, got {type(raw).__name__}")


# --- NumericDate -----------------------------------------------------------


def to_numeric_date(value: datetime | NumericDate) -> NumericDate:
    """
    Seconds since the epoch, as used by `exp`, `nbf` and `iat`.

    Naive datetimes are taken to be UTC. Booleans are rejected even though
    they are ints.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        ts = value.timestamp()
        return int(ts) if ts.is_integer() else ts
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"NumericDate must be a number or datetime, got {type(value).__name__}")
    return value


def from_numeric_date(value: NumericDate) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)
