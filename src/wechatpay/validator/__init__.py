"""Response validation and signature verification."""

from .response import NullValidator, Validator, WechatPayValidator
from .verifier import CertificateVerifier, NullVerifier, Verifier

__all__ = [
    "Validator",
    "NullValidator",
    "WechatPayValidator",
    "Verifier",
    "NullVerifier",
    "CertificateVerifier",
]
