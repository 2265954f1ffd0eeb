from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .constants import Algorithm
    from .entities import Header


class Signer(Protocol):
    """
    Port for an algorithm+key bound signer.

    Implementations live in the adapters layer (HMAC, RSA, RSA-PSS, ECDSA).
    They are immutable once built and may be shared between threads.
    """

    @property
    def algorithm(self) -> "Algorithm":
        ...

    def sign(self, data: bytes) -> bytes:
        """
        Sign `data` and return the base64url-encoded signature segment.

        RSA-PSS and ECDSA signatures are randomized: signing the same input
        twice gives different bytes, and both verify.
        """
        ...

    def verify(self, data: bytes, signature: bytes | str) -> bytes:
        """
        Verify an encoded signature segment over `data`.

        Returns:
            the decoded raw signature bytes.
        Raises:
            InvalidSignatureError for any failure, including bad base64url.
        """
        ...

    def encode(self, obj: Any) -> bytes:
        ...

    def decode(self, token: bytes | str, target: Any) -> Any:
        ...


class KeySource(Protocol):
    """
    Port for loading key material for a given algorithm.

    `load` returns a shared secret (bytes) for HMAC algorithms, and a
    `cryptography` key object or a KeyPair for asymmetric ones.
    """

    def load(self, algorithm: "Algorithm") -> Any:
        ...


# --- Binding capabilities --------------------------------------------------


@runtime_checkable
class HeaderBinding(Protocol):
    """Decode target that accepts the verified header."""

    def bind_header(self, header: "Header") -> None:
        ...


@runtime_checkable
class PayloadBinding(Protocol):
    """Decode target that accepts the verified payload (a JSON object)."""

    def bind_payload(self, payload: Mapping[str, Any]) -> None:
        ...


@runtime_checkable
class SignatureBinding(Protocol):
    """Decode target that accepts the raw, decoded signature bytes."""

    def bind_signature(self, signature: bytes) -> None:
        ...
