"""Parsing and verification of dot-format tokens."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict

from .crypto.registry import VerifierRegistry
from .errors import (
    AudienceMismatchError,
    DecodeError,
    MalformedTokenError,
    SignatureMismatchError,
    TokenExpiredError,
    TokenNotYetValidError,
    UnsupportedAlgorithmError,
)
from .token import ALGORITHM_HEADER, KEY_ID_HEADER, JsonToken
from .utils import codec
from .utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

DEFAULT_CLOCK_SKEW = timedelta(minutes=2)


class ParsedToken(BaseModel):
    """The three segments of a wire token, decoded but not yet verified."""

    model_config = ConfigDict(frozen=True)

    header: dict[str, Any]
    payload: dict[str, Any]
    base_string: str
    signature: bytes

    @property
    def algorithm(self) -> str:
        return self.header[ALGORITHM_HEADER]

    @property
    def key_id(self) -> str | None:
        return self.header.get(KEY_ID_HEADER)


def _decode_segment(segment: str, name: str) -> bytes:
    try:
        return codec.decode_base64url(segment)
    except DecodeError as exc:
        raise MalformedTokenError(f"Token {name} is not valid base64url", segment=name) from exc


def _decode_object(segment: str, name: str) -> dict[str, Any]:
    raw = _decode_segment(segment, name)
    try:
        value = codec.from_json(raw.decode("utf-8"))
    except ValueError as exc:
        raise MalformedTokenError(f"Token {name} is not valid JSON", segment=name) from exc
    if not isinstance(value, dict):
        raise MalformedTokenError(f"Token {name} must be a JSON object", segment=name)
    return value


def split_token(token: str) -> ParsedToken:
    """Split and decode a wire token without checking its signature.

    The base string is kept exactly as it appeared on the wire, since
    re-serializing the decoded JSON is not guaranteed to reproduce it.
    """

    if not isinstance(token, str):
        raise MalformedTokenError("Token must be a string")

    segments = codec.split(token)
    if len(segments) == 2:
        raise MalformedTokenError("Token is unsigned; expected header.payload.signature")
    if len(segments) != 3:
        raise MalformedTokenError(f"Token has {len(segments)} segment(s); expected 3")

    header_segment, payload_segment, signature_segment = segments
    header = _decode_object(header_segment, "header")
    algorithm = header.get(ALGORITHM_HEADER)
    if not isinstance(algorithm, str) or not algorithm:
        raise MalformedTokenError("Token header is missing the algorithm", segment="header")
    key_id = header.get(KEY_ID_HEADER)
    if key_id is not None and not isinstance(key_id, str):
        raise MalformedTokenError("Token header key id must be a string", segment="header")

    payload = _decode_object(payload_segment, "payload")
    signature = _decode_segment(signature_segment, "signature")

    return ParsedToken(
        header=header,
        payload=payload,
        base_string=codec.join([header_segment, payload_segment]),
        signature=signature,
    )


class JsonTokenParser:
    """Verifies wire tokens against a registry of verifiers keyed by algorithm."""

    def __init__(
        self,
        registry: VerifierRegistry,
        clock: Clock | None = None,
        *,
        audience: str | None = None,
        clock_skew: timedelta = DEFAULT_CLOCK_SKEW,
    ) -> None:
        self.registry = registry
        self.clock: Clock = clock if clock is not None else SystemClock()
        self.audience = audience
        self.clock_skew = clock_skew

    def deserialize(self, token: str) -> JsonToken:
        """Decode ``token`` into a read-only token. The signature is NOT checked."""

        return self._to_token(split_token(token))

    def verify(self, token: str) -> JsonToken:
        parsed = split_token(token)
        self._verify_signature(parsed)
        return self._to_token(parsed)

    def verify_and_deserialize(self, token: str) -> JsonToken:
        """Check the signature and then the registered time and audience claims."""

        json_token = self.verify(token)
        self._check_claims(json_token)
        return json_token

    def _to_token(self, parsed: ParsedToken) -> JsonToken:
        return JsonToken.from_payload(
            parsed.payload,
            self.clock,
            header=parsed.header,
            base_string=parsed.base_string,
            signature=parsed.signature,
        )

    def _verify_signature(self, parsed: ParsedToken) -> None:
        verifiers = self.registry.find(parsed.algorithm, parsed.key_id)
        if not verifiers:
            logger.debug(
                "Rejected token: no verifier for alg=%s kid=%s", parsed.algorithm, parsed.key_id
            )
            raise UnsupportedAlgorithmError(
                f"No verifier registered for algorithm {parsed.algorithm!r}"
            )

        message = parsed.base_string.encode("ascii")
        for verifier in verifiers:
            try:
                verifier.verify_signature(message, parsed.signature)
            except SignatureMismatchError:
                continue
            return

        logger.debug(
            "Rejected token: signature mismatch for alg=%s kid=%s", parsed.algorithm, parsed.key_id
        )
        raise SignatureMismatchError("Token signature did not verify")

    def _check_claims(self, token: JsonToken) -> None:
        now = self.clock.now()

        expiration = token.expiration
        if expiration is not None and expiration < now - self.clock_skew:
            raise TokenExpiredError("Token has expired")

        issued_at = token.issued_at
        if issued_at is not None and issued_at > now + self.clock_skew:
            raise TokenNotYetValidError("Token was issued in the future")

        if self.audience is not None and token.audience != self.audience:
            raise AudienceMismatchError("Token audience does not match")


__all__ = ["DEFAULT_CLOCK_SKEW", "ParsedToken", "split_token", "JsonTokenParser"]
