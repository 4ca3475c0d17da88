from .tokens import (
    InvalidClaimsError,
    ReservedClaimError,
    TokenServiceError,
    build_parser,
    build_registry,
    build_signer,
    issue_token,
    verify_token,
)

__all__ = [
    "InvalidClaimsError",
    "ReservedClaimError",
    "TokenServiceError",
    "build_parser",
    "build_registry",
    "build_signer",
    "issue_token",
    "verify_token",
]
