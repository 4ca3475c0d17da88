from __future__ import annotations

import hmac
from hashlib import sha256

from ..errors import InvalidKeyError, SignatureMismatchError
from .base import SignatureAlgorithm, Signer, Verifier


def _coerce_key(key: object) -> bytes:
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise InvalidKeyError("HMAC key must be a bytes-like object")
    key_bytes = bytes(key)
    if not key_bytes:
        raise InvalidKeyError("HMAC key must not be empty")
    return key_bytes


class HmacSHA256Signer(Signer):
    """Signs byte strings with HMAC-SHA256."""

    def __init__(self, key_id: str | None, issuer: str | None, key: bytes) -> None:
        self._key = _coerce_key(key)
        self._key_id = key_id
        self._issuer = issuer

    @property
    def algorithm(self) -> str:
        return SignatureAlgorithm.HS256.json_name

    @property
    def key_id(self) -> str | None:
        return self._key_id

    @property
    def issuer(self) -> str | None:
        return self._issuer

    def sign(self, message: bytes) -> bytes:
        return hmac.new(self._key, message, sha256).digest()

    def __repr__(self) -> str:
        return f"HmacSHA256Signer(key_id={self._key_id!r}, issuer={self._issuer!r})"


class HmacSHA256Verifier(Verifier):
    """Verifies HMAC-SHA256 signatures made with a shared secret."""

    def __init__(self, key: bytes, *, key_id: str | None = None) -> None:
        self._signer = HmacSHA256Signer(key_id, None, key)

    @property
    def algorithm(self) -> str:
        return self._signer.algorithm

    @property
    def key_id(self) -> str | None:
        return self._signer.key_id

    def verify_signature(self, message: bytes, signature: bytes) -> None:
        expected = self._signer.sign(message)
        if not isinstance(signature, (bytes, bytearray, memoryview)):
            raise SignatureMismatchError("Signature must be a bytes-like object")
        if not hmac.compare_digest(expected, signature):
            raise SignatureMismatchError("Signature did not verify")

    def __repr__(self) -> str:
        return f"HmacSHA256Verifier(key_id={self.key_id!r})"


__all__ = ["HmacSHA256Signer", "HmacSHA256Verifier"]
