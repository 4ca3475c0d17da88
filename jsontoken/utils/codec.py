from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Iterable

from ..errors import DecodeError

DELIMITER = "."

_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


def encode_base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_base64url(data: str) -> bytes:
    """Decode unpadded base64url text.

    Only the canonical encoding of a byte string is accepted, so two distinct
    strings never decode to the same bytes.
    """

    if not isinstance(data, str) or not _BASE64URL_RE.fullmatch(data):
        raise DecodeError("Input contains characters outside the base64url alphabet")
    if len(data) % 4 == 1:
        raise DecodeError("Input length is not a valid base64url length")

    padding = "=" * (-len(data) % 4)
    try:
        decoded = base64.urlsafe_b64decode(data + padding)
    except binascii.Error as exc:
        raise DecodeError("Input is not valid base64url") from exc

    if encode_base64url(decoded) != data:
        raise DecodeError("Input is not a canonical base64url encoding")
    return decoded


def join(parts: Iterable[str]) -> str:
    return DELIMITER.join(parts)


def split(token: str) -> list[str]:
    """Split on the delimiter, keeping empty segments; callers check the count."""

    return token.split(DELIMITER)


def to_json(value: Any) -> str:
    """Serialize ``value`` with the canonical member ordering used for signing."""

    return json.dumps(value, separators=(",", ":"), sort_keys=True, allow_nan=False)


def from_json(data: bytes | str) -> Any:
    return json.loads(data)


__all__ = [
    "DELIMITER",
    "encode_base64url",
    "decode_base64url",
    "join",
    "split",
    "to_json",
    "from_json",
]
