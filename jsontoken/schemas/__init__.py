from .token import IssueTokenRequest, TokenResponse, VerifiedTokenResponse, VerifyTokenRequest

__all__ = [
    "IssueTokenRequest",
    "TokenResponse",
    "VerifiedTokenResponse",
    "VerifyTokenRequest",
]
