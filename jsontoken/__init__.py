"""Compact signed JSON tokens (JSON Simple Sign)."""

from .crypto import (
    HmacSHA256Signer,
    HmacSHA256Verifier,
    SignatureAlgorithm,
    Signer,
    Verifier,
    VerifierRegistry,
)
from .errors import (
    AudienceMismatchError,
    ClaimValidationError,
    DecodeError,
    InvalidKeyError,
    JsonTokenError,
    MalformedTokenError,
    NotSignableError,
    SignatureMismatchError,
    TokenExpiredError,
    TokenFrozenError,
    TokenNotYetValidError,
    UnsupportedAlgorithmError,
)
from .parser import JsonTokenParser, ParsedToken, split_token
from .token import JsonToken, SignedToken, TokenState
from .utils.clock import Clock, FixedClock, SystemClock

__version__ = "0.1.0"

__all__ = [
    "HmacSHA256Signer",
    "HmacSHA256Verifier",
    "SignatureAlgorithm",
    "Signer",
    "Verifier",
    "VerifierRegistry",
    "AudienceMismatchError",
    "ClaimValidationError",
    "DecodeError",
    "InvalidKeyError",
    "JsonTokenError",
    "MalformedTokenError",
    "NotSignableError",
    "SignatureMismatchError",
    "TokenExpiredError",
    "TokenFrozenError",
    "TokenNotYetValidError",
    "UnsupportedAlgorithmError",
    "JsonTokenParser",
    "ParsedToken",
    "split_token",
    "JsonToken",
    "SignedToken",
    "TokenState",
    "Clock",
    "FixedClock",
    "SystemClock",
]
