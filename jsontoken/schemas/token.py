from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..config import MAX_LIFETIME_SECONDS
from ..token import JsonToken


class IssueTokenRequest(BaseModel):
    """Claims to sign into a new token."""

    model_config = ConfigDict(extra="forbid")

    audience: str | None = Field(default=None, max_length=255, description="Value of the `aud` claim")
    claims: dict[str, Any] = Field(default_factory=dict, description="Private claims to include")
    lifetime_seconds: int | None = Field(
        default=None, ge=1, le=MAX_LIFETIME_SECONDS, description="Overrides the configured lifetime"
    )


class TokenResponse(BaseModel):
    """Response returned after a token has been issued."""

    token: str = Field(description="Signed token to use in the Authorization header")
    token_type: str = Field(default="bearer", description="Type of token returned")
    expires_in: int = Field(description="Lifetime of the token in seconds")
    expires_at: datetime = Field(description="UTC timestamp when the token expires")
    header: dict[str, Any]


class VerifyTokenRequest(BaseModel):
    token: str = Field(min_length=1)


class VerifiedTokenResponse(BaseModel):
    """Claims of a token whose signature and registered claims were accepted."""

    header: dict[str, Any]
    claims: dict[str, Any]
    issuer: str | None = None
    audience: str | None = None
    issued_at: datetime | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_token(cls, token: JsonToken) -> VerifiedTokenResponse:
        return cls(
            header=token.header,
            claims=token.payload,
            issuer=token.issuer,
            audience=token.audience,
            issued_at=token.issued_at,
            expires_at=token.expiration,
        )
