from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ..schemas import IssueTokenRequest, TokenResponse, VerifiedTokenResponse, VerifyTokenRequest
from ..services import tokens as token_service
from ..token import JsonToken
from .dependencies import ClockDep, SettingsDep, VerifiedToken, verify_or_reject

router = APIRouter()


@router.post("", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def issue_token(
    payload: IssueTokenRequest, settings: SettingsDep, clock: ClockDep
) -> TokenResponse:
    """Sign the requested claims with the configured key."""

    try:
        signed = token_service.issue_token(
            payload.claims,
            audience=payload.audience,
            lifetime_seconds=payload.lifetime_seconds,
            settings=settings,
            clock=clock,
        )
    except token_service.TokenServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    expires_at = JsonToken.from_payload(signed.payload).expiration
    return TokenResponse(
        token=signed.token,
        expires_in=payload.lifetime_seconds or settings.lifetime_seconds,
        expires_at=expires_at,
        header=signed.header,
    )


@router.post("/verify", response_model=VerifiedTokenResponse)
async def verify_token(
    payload: VerifyTokenRequest, settings: SettingsDep, clock: ClockDep
) -> VerifiedTokenResponse:
    """Check a token's signature and registered claims."""

    token = verify_or_reject(payload.token, settings, clock)
    return VerifiedTokenResponse.from_token(token)


@router.get("/me", response_model=VerifiedTokenResponse)
async def read_bearer_token(token: VerifiedToken) -> VerifiedTokenResponse:
    """Return the claims of the bearer token sent with the request."""

    return VerifiedTokenResponse.from_token(token)
