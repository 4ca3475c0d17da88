from .base import SignatureAlgorithm, Signer, Verifier
from .hmac_sha256 import HmacSHA256Signer, HmacSHA256Verifier
from .registry import VerifierRegistry

__all__ = [
    "SignatureAlgorithm",
    "Signer",
    "Verifier",
    "HmacSHA256Signer",
    "HmacSHA256Verifier",
    "VerifierRegistry",
]
