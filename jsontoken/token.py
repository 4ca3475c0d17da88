"""Token model: claims, canonical base string and signing."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .crypto.base import Signer
from .errors import MalformedTokenError, NotSignableError, TokenFrozenError
from .utils import codec
from .utils.clock import Clock, SystemClock, from_epoch_seconds, to_epoch_seconds

logger = logging.getLogger(__name__)

# header names
ALGORITHM_HEADER = "alg"
KEY_ID_HEADER = "kid"
TYPE_HEADER = "typ"

# registered claim names
ISSUER = "iss"
ISSUED_AT = "iat"
EXPIRATION = "exp"
AUDIENCE = "aud"

DEFAULT_LIFETIME = timedelta(minutes=2)


class TokenState(str, Enum):
    FRESH = "fresh"
    BASE_STRING_COMPUTED = "base_string_computed"
    SIGNED = "signed"
    SERIALIZED = "serialized"
    READ_ONLY = "read_only"


class SignedToken(BaseModel):
    """Immutable result of signing a token."""

    model_config = ConfigDict(frozen=True)

    header: dict[str, Any]
    payload: dict[str, Any]
    base_string: str = Field(description="Exact text the signature was computed over")
    signature: bytes
    token: str = Field(description="Compact dot-format serialization")

    def __str__(self) -> str:
        return self.token


class JsonToken:
    """A JSON token bound either to a signer (issuance) or to a parsed payload (read-only).

    Claims may be changed until the base string is computed. From then on the
    base string and the signature are cached and returned unchanged.
    """

    def __init__(
        self,
        signer: Signer,
        clock: Clock | None = None,
        *,
        lifetime: timedelta = DEFAULT_LIFETIME,
    ) -> None:
        if signer is None:
            raise TypeError("signer is required; use JsonToken.from_payload for parsed tokens")

        self._signer: Signer | None = signer
        self._clock: Clock | None = clock if clock is not None else SystemClock()
        self._lifetime = lifetime
        self._payload: dict[str, Any] = {}
        self._parsed_header: dict[str, Any] | None = None
        self._state = TokenState.FRESH
        self._base_string: str | None = None
        self._signature: bytes | None = None
        self._serialized: str | None = None
        self._signed_payload: dict[str, Any] | None = None

        if signer.issuer is not None:
            self._payload[ISSUER] = signer.issuer

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        clock: Clock | None = None,
        *,
        header: Mapping[str, Any] | None = None,
        base_string: str | None = None,
        signature: bytes | None = None,
    ) -> JsonToken:
        """Wrap an already-parsed payload. The resulting token cannot be signed."""

        token = cls.__new__(cls)
        token._signer = None
        token._clock = clock
        token._lifetime = DEFAULT_LIFETIME
        token._payload = copy.deepcopy(dict(payload))
        token._parsed_header = dict(header) if header is not None else None
        token._base_string = base_string
        token._signature = signature
        token._serialized = None
        token._signed_payload = None
        if base_string is not None and signature is not None:
            token._serialized = codec.join([base_string, codec.encode_base64url(signature)])
        token._state = TokenState.READ_ONLY
        return token

    # -- state -----------------------------------------------------------------

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def is_read_only(self) -> bool:
        return self._signer is None

    @property
    def signer(self) -> Signer | None:
        return self._signer

    @property
    def clock(self) -> Clock | None:
        return self._clock

    @property
    def base_string(self) -> str | None:
        return self._base_string

    @property
    def signature(self) -> bytes | None:
        return self._signature

    @property
    def serialized(self) -> str | None:
        return self._serialized

    def _ensure_mutable(self) -> None:
        if self._signer is None:
            raise TokenFrozenError("Token was built from a parsed payload and is read-only")
        if self._state is not TokenState.FRESH:
            raise TokenFrozenError("Claims cannot change once the base string has been computed")

    # -- header ----------------------------------------------------------------

    @property
    def header(self) -> dict[str, Any]:
        if self._signer is None:
            return dict(self._parsed_header or {})

        header: dict[str, Any] = {ALGORITHM_HEADER: self._signer.algorithm}
        if self._signer.key_id is not None:
            header[KEY_ID_HEADER] = self._signer.key_id
        return header

    @property
    def algorithm(self) -> str | None:
        if self._signer is not None:
            return self._signer.algorithm
        return self.header.get(ALGORITHM_HEADER)

    @property
    def key_id(self) -> str | None:
        if self._signer is not None:
            return self._signer.key_id
        return self.header.get(KEY_ID_HEADER)

    # -- claims ----------------------------------------------------------------

    @property
    def payload(self) -> dict[str, Any]:
        return copy.deepcopy(self._payload)

    def get_param(self, name: str, default: Any = None) -> Any:
        return copy.deepcopy(self._payload.get(name, default))

    def set_param(self, name: str, value: Any) -> None:
        if not isinstance(name, str):
            raise TypeError("Claim names must be strings")
        self._ensure_mutable()
        self._payload[name] = copy.deepcopy(value)

    def _get_string(self, name: str) -> str | None:
        value = self._payload.get(name)
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def _get_instant(self, name: str) -> datetime | None:
        value = self._payload.get(name)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedTokenError(f"Claim {name!r} is not a number of seconds", segment="payload")
        try:
            return from_epoch_seconds(int(value))
        except (OverflowError, ValueError) as exc:
            raise MalformedTokenError(
                f"Claim {name!r} is not a representable instant", segment="payload"
            ) from exc

    def _now(self) -> datetime:
        if self._clock is None:
            raise NotSignableError("Token has no clock to supply the current time")
        return self._clock.now()

    @property
    def issuer(self) -> str | None:
        return self._get_string(ISSUER)

    @property
    def audience(self) -> str | None:
        return self._get_string(AUDIENCE)

    def set_audience(self, audience: str) -> None:
        self.set_param(AUDIENCE, audience)

    @property
    def issued_at(self) -> datetime | None:
        return self._get_instant(ISSUED_AT)

    def set_issued_at(self, instant: datetime | None = None) -> None:
        """Store ``instant`` (default: the clock's now) truncated to whole seconds."""

        self._ensure_mutable()
        if instant is None:
            instant = self._now()
        self._payload[ISSUED_AT] = to_epoch_seconds(instant)

    @property
    def expiration(self) -> datetime | None:
        return self._get_instant(EXPIRATION)

    def set_expiration(self, instant: datetime | None = None) -> None:
        """Store ``instant`` truncated to whole seconds.

        Without an argument the token expires one lifetime after its issued-at
        claim, or after the clock's now when no issued-at is set.
        """

        self._ensure_mutable()
        if instant is None:
            start = self.issued_at or self._now()
            instant = start + self._lifetime
        self._payload[EXPIRATION] = to_epoch_seconds(instant)

    # -- signing ---------------------------------------------------------------

    def compute_base_string(self) -> str:
        if self._base_string is not None:
            return self._base_string
        if self._signer is None:
            raise NotSignableError("Token has no signer and no base string from the wire")

        header_segment = codec.encode_base64url(codec.to_json(self.header).encode("utf-8"))
        payload_segment = codec.encode_base64url(codec.to_json(self._payload).encode("utf-8"))
        self._base_string = codec.join([header_segment, payload_segment])
        self._signed_payload = copy.deepcopy(self._payload)
        self._state = TokenState.BASE_STRING_COMPUTED
        return self._base_string

    def sign(self) -> bytes:
        if self._signature is not None:
            return self._signature
        if self._signer is None:
            raise NotSignableError("Token has no signer")

        base_string = self.compute_base_string()
        self._signature = self._signer.sign(base_string.encode("ascii"))
        self._state = TokenState.SIGNED
        logger.debug(
            "Signed token with alg=%s kid=%s", self._signer.algorithm, self._signer.key_id
        )
        return self._signature

    def serialize_and_sign(self) -> str:
        """Return ``base64url(header).base64url(payload).base64url(signature)``."""

        if self._signer is None:
            raise NotSignableError("Token was built from a parsed payload and cannot be signed")
        if self._serialized is not None:
            return self._serialized

        base_string = self.compute_base_string()
        signature = self.sign()
        self._serialized = codec.join([base_string, codec.encode_base64url(signature)])
        self._state = TokenState.SERIALIZED
        return self._serialized

    def signed(self) -> SignedToken:
        token = self.serialize_and_sign()
        return SignedToken(
            header=self.header,
            payload=copy.deepcopy(self._signed_payload),
            base_string=self.compute_base_string(),
            signature=self.sign(),
            token=token,
        )

    def __str__(self) -> str:
        return codec.to_json(self._payload)

    def __repr__(self) -> str:
        mode = "read-only" if self._signer is None else self._state.value
        return f"JsonToken(alg={self.algorithm!r}, kid={self.key_id!r}, state={mode!r})"


__all__ = [
    "ALGORITHM_HEADER",
    "KEY_ID_HEADER",
    "TYPE_HEADER",
    "ISSUER",
    "ISSUED_AT",
    "EXPIRATION",
    "AUDIENCE",
    "DEFAULT_LIFETIME",
    "TokenState",
    "SignedToken",
    "JsonToken",
]
