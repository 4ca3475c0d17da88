from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import Settings, get_settings
from ..errors import (
    ClaimValidationError,
    MalformedTokenError,
    SignatureMismatchError,
    TokenExpiredError,
)
from ..services import tokens as token_service
from ..token import JsonToken
from ..utils.clock import Clock, SystemClock


bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Use the `/api/tokens` endpoint to obtain a signed token.",
)


def get_clock() -> Clock:
    return SystemClock()


SettingsDep = Annotated[Settings, Depends(get_settings)]
ClockDep = Annotated[Clock, Depends(get_clock)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _unauthorised(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_or_reject(token: str, settings: Settings, clock: Clock) -> JsonToken:
    """Verify ``token`` and translate failures into 401 responses."""

    try:
        return token_service.verify_token(token, settings=settings, clock=clock)
    except TokenExpiredError as exc:
        raise _unauthorised("Token has expired") from exc
    except ClaimValidationError as exc:
        raise _unauthorised("Token claims are not acceptable") from exc
    except (SignatureMismatchError, MalformedTokenError) as exc:
        raise _unauthorised("Invalid authentication credentials") from exc


async def get_verified_token(
    credentials: CredentialsDep, settings: SettingsDep, clock: ClockDep
) -> JsonToken:
    if credentials is None or not credentials.credentials:
        raise _unauthorised("Not authenticated")
    return verify_or_reject(credentials.credentials, settings, clock)


VerifiedToken = Annotated[JsonToken, Depends(get_verified_token)]
