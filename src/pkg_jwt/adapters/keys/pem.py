from __future__ import annotations

import base64
import binascii
import re
from pathlib import Path
from typing import Any, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives.serialization import (
    load_pem_private_key,
    load_pem_public_key,
)

from ...domain.constants import Algorithm, KeyType
from ...domain.entities import KeyPair
from ...domain.exceptions import InvalidKeyError

_PEM_BLOCK_RE = re.compile(
    rb"-----BEGIN (?P<label>[A-Z0-9 ]+)-----\s*(?P<body>.*?)\s*-----END (?P=label)-----",
    re.DOTALL,
)


class PEM:
    """
    Key source reading PEM files from disk.

    - HMAC algorithms: the secret is the decoded body of the first block.
    - RSA / ECDSA algorithms: private keys, public keys and certificates are
      recognised. A private key in one file and a public key (or
      certificate) in another combine into one KeyPair.
    """

    __slots__ = ("_paths", "_password")

    def __init__(self, *paths: str | Path, password: Optional[bytes] = None) -> None:
        if not paths:
            raise InvalidKeyError("PEM needs at least one path")
        self._paths: Tuple[Path, ...] = tuple(Path(p) for p in paths)
        self._password = password

    @property
    def paths(self) -> Tuple[Path, ...]:
        return self._paths

    def __repr__(self) -> str:
        return f"PEM({', '.join(str(p) for p in self._paths)})"

    # ------------------------------------------------------------------ #
    # KeySource implementation
    # ------------------------------------------------------------------ #

    def load(self, algorithm: Algorithm) -> Any:
        blocks = [block for path in self._paths for block in self._read_blocks(path)]
        if not blocks:
            raise InvalidKeyError(f"No PEM blocks found in {self!r}")

        if algorithm.key_type is KeyType.SYMMETRIC:
            return self._secret(blocks[0])

        private_key = None
        public_key = None
        for label, block in blocks:
            if "PRIVATE KEY" in label and private_key is None:
                private_key = self._load_private(block)
            elif "CERTIFICATE" in label and public_key is None:
                public_key = self._load_certificate(block)
            elif "PUBLIC KEY" in label and public_key is None:
                public_key = self._load_public(block)

        if private_key is None and public_key is None:
            raise InvalidKeyError(f"No usable key for {algorithm} in {self!r}")
        return KeyPair(private_key=private_key, public_key=public_key)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _read_blocks(path: Path) -> list[tuple[str, bytes]]:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise InvalidKeyError(f"Cannot read key file {path}: {exc}") from exc
        return [
            (m.group("label").decode("ascii"), m.group(0))
            for m in _PEM_BLOCK_RE.finditer(data)
        ]

    @staticmethod
    def _secret(block: tuple[str, bytes]) -> bytes:
        m = _PEM_BLOCK_RE.match(block[1])
        body = b"".join(m.group("body").split()) if m else b""
        try:
            secret = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidKeyError(f"Invalid PEM body in {block[0]} block") from exc
        if not secret:
            raise InvalidKeyError(f"Empty {block[0]} block")
        return secret

    def _load_private(self, block: bytes) -> Any:
        try:
            return load_pem_private_key(block, password=self._password)
        except (ValueError, TypeError) as exc:
            raise InvalidKeyError(f"Invalid private key: {exc}") from exc

    @staticmethod
    def _load_public(block: bytes) -> Any:
        try:
            return load_pem_public_key(block)
        except (ValueError, TypeError) as exc:
            raise InvalidKeyError(f"Invalid public key: {exc}") from exc

    @staticmethod
    def _load_certificate(block: bytes) -> Any:
        try:
            return x509.load_pem_x509_certificate(block).public_key()
        except ValueError as exc:
            raise InvalidKeyError(f"Invalid certificate: {exc}") from exc
