from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


@dataclass(slots=True)
class SignerSettings:
    """
    Algorithm + key wiring for one signer.

    Host code decides how to construct this (config file, secrets store,
    etc.). Exactly one of `secret`, `pem_paths` or `jwk` must be set.
    """
    algorithm: str
    secret: Optional[str | bytes] = None
    pem_paths: List[str] = field(default_factory=list)
    pem_password: Optional[bytes] = None
    jwk: Optional[Mapping[str, Any] | str] = None

    @property
    def key_sources(self) -> List[str]:
        configured = []
        if self.secret is not None:
            configured.append("secret")
        if self.pem_paths:
            configured.append("pem_paths")
        if self.jwk is not None:
            configured.append("jwk")
        return configured
