"""Signer and verifier contracts.

New algorithms are added as further implementations of these classes and
registered under their JSON algorithm name; the token model only ever sees the
contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class SignatureAlgorithm(str, Enum):
    """Registered algorithm names as they appear in the ``alg`` header."""

    HS256 = "HS256"

    @property
    def json_name(self) -> str:
        return self.value


class Signer(ABC):
    @property
    @abstractmethod
    def algorithm(self) -> str:
        """Name written to the ``alg`` header."""

    @property
    def key_id(self) -> str | None:
        return None

    @property
    def issuer(self) -> str | None:
        return None

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """Return the signature of ``message``."""


class Verifier(ABC):
    @property
    @abstractmethod
    def algorithm(self) -> str:
        """Name of the algorithm this verifier checks."""

    @property
    def key_id(self) -> str | None:
        return None

    @abstractmethod
    def verify_signature(self, message: bytes, signature: bytes) -> None:
        """Return silently when ``signature`` is valid for ``message``.

        Raises ``SignatureMismatchError`` otherwise.
        """


__all__ = ["SignatureAlgorithm", "Signer", "Verifier"]
