from __future__ import annotations


class JsonTokenError(Exception):
    """Base class for token-related errors."""


class InvalidKeyError(JsonTokenError):
    """Raised when key material cannot be used by a signer or verifier."""


class SignatureMismatchError(JsonTokenError):
    """Raised when a signature does not verify."""


class UnsupportedAlgorithmError(SignatureMismatchError):
    """Raised when no verifier is registered for the token's algorithm or key id."""


class DecodeError(JsonTokenError):
    """Raised when a base64url string cannot be decoded."""


class MalformedTokenError(JsonTokenError):
    """Raised when a wire token has the wrong shape or an undecodable segment."""

    def __init__(self, message: str, *, segment: str | None = None) -> None:
        super().__init__(message)
        self.segment = segment


class NotSignableError(JsonTokenError):
    """Raised when a token without a signer is asked to sign itself."""


class TokenFrozenError(JsonTokenError):
    """Raised when a claim is set after the base string has been computed."""


class ClaimValidationError(JsonTokenError):
    """Base class for failures of the registered-claim checks."""


class TokenExpiredError(ClaimValidationError):
    """Raised when a token's expiration lies in the past."""


class TokenNotYetValidError(ClaimValidationError):
    """Raised when a token claims to be issued in the future."""


class AudienceMismatchError(ClaimValidationError):
    """Raised when the token audience is not the expected one."""


__all__ = [
    "JsonTokenError",
    "InvalidKeyError",
    "SignatureMismatchError",
    "UnsupportedAlgorithmError",
    "DecodeError",
    "MalformedTokenError",
    "NotSignableError",
    "TokenFrozenError",
    "ClaimValidationError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "AudienceMismatchError",
]
