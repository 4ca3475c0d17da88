from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Mapping

from ..config import Settings, get_settings
from ..crypto import HmacSHA256Signer, HmacSHA256Verifier, VerifierRegistry
from ..parser import JsonTokenParser
from ..token import ISSUER, JsonToken, SignedToken
from ..utils.clock import Clock

logger = logging.getLogger(__name__)


class TokenServiceError(Exception):
    """Base exception for issuance failures caused by the request."""


class ReservedClaimError(TokenServiceError):
    """Raised when a caller tries to set a claim the issuer controls."""


class InvalidClaimsError(TokenServiceError):
    """Raised when claims are not JSON-encodable or the lifetime is out of range."""


# Claims the issuer controls; callers cannot override them through extra claims.
RESERVED_CLAIMS = frozenset({"iat", "exp"})


def build_signer(settings: Settings | None = None) -> HmacSHA256Signer:
    settings = settings or get_settings()
    return HmacSHA256Signer(settings.key_id, settings.issuer, settings.secret_key.encode("utf-8"))


def build_registry(settings: Settings | None = None) -> VerifierRegistry:
    settings = settings or get_settings()
    verifier = HmacSHA256Verifier(settings.secret_key.encode("utf-8"), key_id=settings.key_id)
    return VerifierRegistry([verifier])


def build_parser(settings: Settings | None = None, clock: Clock | None = None) -> JsonTokenParser:
    settings = settings or get_settings()
    return JsonTokenParser(
        build_registry(settings),
        clock,
        audience=settings.audience,
        clock_skew=timedelta(seconds=settings.clock_skew_seconds),
    )


def issue_token(
    claims: Mapping[str, Any] | None = None,
    *,
    audience: str | None = None,
    lifetime_seconds: int | None = None,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> SignedToken:
    """Sign ``claims`` with the configured key and stamp the time claims."""

    settings = settings or get_settings()
    claims = claims or {}
    for name in claims:
        if name in RESERVED_CLAIMS:
            raise ReservedClaimError(f"Claim {name!r} is set by the issuer")
        if name == ISSUER and settings.issuer is not None:
            raise ReservedClaimError("Claim 'iss' is fixed by the configured issuer")

    try:
        lifetime = timedelta(seconds=lifetime_seconds or settings.lifetime_seconds)
        token = JsonToken(build_signer(settings), clock, lifetime=lifetime)
        for name, value in claims.items():
            token.set_param(name, value)

        audience = audience or settings.audience
        if audience is not None:
            token.set_audience(audience)
        token.set_issued_at()
        token.set_expiration()

        signed = token.signed()
    except (OverflowError, TypeError, ValueError) as exc:
        raise InvalidClaimsError("Claims or lifetime cannot be encoded into a token") from exc

    logger.debug("Issued token kid=%s aud=%s", signed.header.get("kid"), audience)
    return signed


def verify_token(
    token: str,
    *,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> JsonToken:
    return build_parser(settings, clock).verify_and_deserialize(token)


__all__ = [
    "TokenServiceError",
    "ReservedClaimError",
    "InvalidClaimsError",
    "RESERVED_CLAIMS",
    "build_signer",
    "build_registry",
    "build_parser",
    "issue_token",
    "verify_token",
]
